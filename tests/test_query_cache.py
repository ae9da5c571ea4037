import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

pytest.importorskip("tree_sitter_language_pack")

import Languages.TreeWalkingLanguage as walker_module  # type: ignore
from Languages.GoLanguage import GoLanguage  # type: ignore
from Languages.JavaLanguage import JavaLanguage  # type: ignore
from Languages.JavaScriptLanguage import JavaScriptLanguage  # type: ignore
from Languages.PythonLanguage import PythonLanguage  # type: ignore
from Languages.RustLanguage import RustLanguage  # type: ignore


class CountingQuery:
    created = 0

    def __init__(self, language, source):
        CountingQuery.created += 1
        self.language = language
        self.source = source


def test_query_is_compiled_once_per_kind(monkeypatch):
    monkeypatch.setattr(walker_module, "Query", CountingQuery)
    CountingQuery.created = 0
    language = PythonLanguage()

    first = language.query("hoverable")
    second = language.query("hoverable")
    scope = language.query("scope")

    assert first is second
    assert scope is not first
    assert first.source == PythonLanguage.hoverable_query
    assert CountingQuery.created == 2


def test_unknown_query_kind_raises_key_error():
    with pytest.raises(KeyError, match="Unknown query kind"):
        PythonLanguage().query("highlights")


def test_builtin_queries_compile_against_their_grammars():
    for language in (PythonLanguage(), RustLanguage(), JavaScriptLanguage(), GoLanguage(), JavaLanguage()):
        for kind in walker_module.QUERY_KINDS:
            assert language.query(kind) is not None


def test_entity_classification():
    language = PythonLanguage()
    assert language.entity_kind(type("N", (), {"type": "function_definition"})()).value == "function_def"
    assert language.entity_kind(type("N", (), {"type": "class_definition"})()).value == "class_def"
    assert language.entity_kind(type("N", (), {"type": "module"})()) is None
