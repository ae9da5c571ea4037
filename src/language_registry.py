"""Registry of per-language capability tables, keyed by language id or alias."""
from __future__ import annotations

import importlib
import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from tree_sitter import Language, Node, Query

from CodeChunk import CodeChunkMiddle
from Definition import Definition
from intelligence_config import RenderConfig
from render import OutputBuffer

logger = logging.getLogger(__name__)


class LanguageSupport(Protocol):
    language_id: str
    aliases: Tuple[str, ...]
    file_extensions: Tuple[str, ...]

    def grammar(self) -> Language: ...
    def query(self, kind: str) -> Query: ...
    def filemap(self, root: Node, code: bytes, config: RenderConfig) -> str: ...
    def get_definition(
        self, root: Node, code: bytes, rows: Sequence[int], path: str, config: RenderConfig
    ) -> Tuple[str, List[Definition]]: ...
    def complete_chunks(
        self,
        root: Node,
        code: bytes,
        chunks: Sequence[CodeChunkMiddle],
        result: OutputBuffer,
        config: RenderConfig,
    ) -> None: ...


_BUILTIN_MODULES = (
    "Languages.PythonLanguage",
    "Languages.RustLanguage",
    "Languages.JavaScriptLanguage",
    "Languages.GoLanguage",
    "Languages.JavaLanguage",
)

_REGISTRY: Dict[str, LanguageSupport] = {}
_EXTENSIONS: Dict[str, str] = {}
_builtins_loaded = False
_lock = Lock()


def register_language(support: LanguageSupport) -> None:
    key = _normalize(support.language_id)
    if not key:
        raise ValueError("Language id must be non-empty")
    for name in (key, *support.aliases):
        _REGISTRY[_normalize(name)] = support
    for ext in support.file_extensions:
        _EXTENSIONS[_normalize(ext).lstrip(".")] = key


def unregister_language(name: str) -> None:
    support = _REGISTRY.get(_normalize(name))
    if support is None:
        return
    for key in [k for k, v in _REGISTRY.items() if v is support]:
        _REGISTRY.pop(key, None)
    for ext in [e for e, lang in _EXTENSIONS.items() if lang == _normalize(support.language_id)]:
        _EXTENSIONS.pop(ext, None)


def get_language_support(name: str) -> Optional[LanguageSupport]:
    _ensure_builtins()
    return _REGISTRY.get(_normalize(name))


def language_for_path(path: str) -> Optional[str]:
    """Language id for a file path based on its extension, or None."""
    _ensure_builtins()
    return _EXTENSIONS.get(_normalize(Path(path).suffix).lstrip("."))


def available_languages() -> Iterable[str]:
    _ensure_builtins()
    return sorted({_normalize(s.language_id) for s in _REGISTRY.values()})


def _ensure_builtins() -> None:
    global _builtins_loaded
    if _builtins_loaded:
        return
    with _lock:
        if _builtins_loaded:
            return
        for module in _BUILTIN_MODULES:
            importlib.import_module(module)
            logger.debug("Loaded language module %s", module)
        _builtins_loaded = True


def _normalize(name: str) -> str:
    return (name or "").strip().lower()


__all__ = [
    "LanguageSupport",
    "register_language",
    "unregister_language",
    "get_language_support",
    "language_for_path",
    "available_languages",
]
