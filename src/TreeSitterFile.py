"""
TreeSitterFile — parse-once façade over the per-language capability tables.

- try_build: size cap -> language lookup -> parser binding -> timed parse
- Each public method consumes the instance (single use)
- All failures surface as `TreeSitterFileError` subclasses
"""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from tree_sitter import Parser, Tree
from tree_sitter import QueryCursor
from tree_sitter import QueryError as TSQueryError

from CodeChunk import CodeChunkMiddle
from Definition import Definition
from intelligence_config import IntelligenceConfig
from language_registry import LanguageSupport, get_language_support
from render import OutputBuffer
from scope_graph import ResolutionMethod, ScopeGraph
from text_range import TextRange
from treesitter_errors import (
    FileTooLarge,
    LanguageMismatch,
    ParseTimeout,
    QueryError,
    UnsupportedLanguage,
)

logger = logging.getLogger(__name__)


def _new_parser(support: LanguageSupport) -> Parser:
    """Bind the grammar to a fresh parser.

    Raises:
        LanguageMismatch: when the grammar cannot be loaded or is ABI-incompatible.
    """
    try:
        return Parser(support.grammar())
    except (ValueError, LookupError, OSError) as exc:
        raise LanguageMismatch(support.language_id) from exc


def _deadline_callback(timeout_micros: int) -> Callable[[object], bool]:
    """Progress callback that cancels the parse once `timeout_micros` have elapsed."""
    deadline = time.monotonic() + timeout_micros / 1_000_000

    def cancel(_state: object) -> bool:
        return time.monotonic() >= deadline

    return cancel


class TreeSitterFile:
    """A parsed source file plus the capability table of its language."""

    def __init__(
        self,
        src: bytes,
        tree: Tree,
        language: LanguageSupport,
        config: IntelligenceConfig,
    ) -> None:
        self._src = src
        self._tree = tree
        self._language = language
        self._config = config
        self._consumed = False

    @classmethod
    def try_build(
        cls,
        src: bytes,
        lang_id: str,
        config: Optional[IntelligenceConfig] = None,
    ) -> "TreeSitterFile":
        """Parse `src` as `lang_id` under the configured guardrails.

        Raises:
            FileTooLarge, UnsupportedLanguage, LanguageMismatch, ParseTimeout
        """
        cfg = config or IntelligenceConfig()
        if len(src) > cfg.max_file_bytes:
            raise FileTooLarge(len(src), cfg.max_file_bytes)

        language = get_language_support(lang_id)
        if language is None:
            raise UnsupportedLanguage(lang_id)

        parser = _new_parser(language)
        started = time.perf_counter()
        try:
            tree = parser.parse(src, progress_callback=_deadline_callback(cfg.parse_timeout_micros))
        except ValueError as exc:
            # The binding reports an aborted parse as a ValueError.
            raise ParseTimeout(cfg.parse_timeout_micros) from exc
        if tree is None:
            raise ParseTimeout(cfg.parse_timeout_micros)
        logger.debug(
            "Parsed %d bytes as %s in %.1f ms",
            len(src),
            language.language_id,
            (time.perf_counter() - started) * 1000,
        )
        return cls(src, tree, language, cfg)

    @property
    def language_id(self) -> str:
        return self._language.language_id

    def _consume(self) -> None:
        if self._consumed:
            raise RuntimeError("TreeSitterFile is single-use; build a new one per operation")
        self._consumed = True

    def hoverable_ranges(self) -> List[TextRange]:
        self._consume()
        query = self._compile("hoverable")
        root = self._tree.root_node
        ranges: List[TextRange] = []
        for _pattern, captures in QueryCursor(query).matches(root):
            for nodes in captures.values():
                ranges.extend(TextRange.from_node(node) for node in nodes)
        return ranges

    def scope_graph(self) -> ScopeGraph:
        """Produce a lexical scope graph for this file."""
        self._consume()
        query = self._compile("scope")
        return ResolutionMethod.GENERIC.build_scope(query, self._tree.root_node, self._src, self.language_id)

    def filemap(self) -> str:
        self._consume()
        return self._language.filemap(self._tree.root_node, self._src, self._config.render)

    def get_definition(self, rows: Sequence[int], path: str) -> Tuple[str, List[Definition]]:
        """Render the entities touching 1-based `rows`, plus the definitions found there."""
        self._consume()
        return self._language.get_definition(self._tree.root_node, self._src, rows, path, self._config.render)

    def get_completed_body_by_chunks(self, chunks: Sequence[CodeChunkMiddle], result: OutputBuffer) -> None:
        """Write a skeleton into `result` with the entities the chunks precisely hit expanded."""
        self._consume()
        self._language.complete_chunks(self._tree.root_node, self._src, chunks, result, self._config.render)

    def _compile(self, kind: str):
        try:
            return self._language.query(kind)
        except TSQueryError as exc:
            raise QueryError(self.language_id, kind, str(exc)) from exc


__all__ = ["TreeSitterFile"]
