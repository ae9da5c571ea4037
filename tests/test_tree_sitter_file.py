import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Real Tree-sitter grammars must be available for these tests
try:
    import tree_sitter_language_pack  # noqa: F401
except ModuleNotFoundError:  # pragma: no cover - environment dependent
    import pytest

    pytest.skip("tree_sitter_language_pack not installed", allow_module_level=True)

from Definition import Definition  # type: ignore
from intelligence_config import IntelligenceConfig  # type: ignore
from language_registry import register_language, unregister_language  # type: ignore
from Languages.PythonLanguage import PythonLanguage  # type: ignore
from TreeSitterFile import TreeSitterFile  # type: ignore
from treesitter_errors import (  # type: ignore
    FileTooLarge,
    LanguageMismatch,
    ParseTimeout,
    QueryError,
    SourceDecodeError,
    TreeSitterFileError,
    UnsupportedLanguage,
)

from tests.fixtures import INVALID_UTF8_SAMPLE, PYTHON_SAMPLE, python_source_of_size


class _BrokenGrammar:
    language_id = "brokenlang"
    aliases = ()
    file_extensions = ()

    def grammar(self):
        raise ValueError("Incompatible Language version")


class _BadQueryPython(PythonLanguage):
    language_id = "badpython"
    aliases = ()
    file_extensions = ()
    hoverable_query = "(no_such_node_type) @hoverable"


class BuildGuardrailTests(unittest.TestCase):
    def test_size_limit_is_inclusive(self):
        at_limit = python_source_of_size(500_000)
        self.assertEqual(len(at_limit), 500_000)
        TreeSitterFile.try_build(at_limit, "python")

        over_limit = python_source_of_size(500_001)
        with self.assertRaises(FileTooLarge) as ctx:
            TreeSitterFile.try_build(over_limit, "python")
        self.assertEqual((ctx.exception.size, ctx.exception.limit), (500_001, 500_000))

    def test_size_limit_follows_config(self):
        with self.assertRaises(FileTooLarge):
            TreeSitterFile.try_build(b"x = 1\n", "python", IntelligenceConfig(max_file_bytes=5))

    def test_unknown_language(self):
        with self.assertRaises(UnsupportedLanguage) as ctx:
            TreeSitterFile.try_build(b"IDENTIFICATION DIVISION.", "cobol")
        self.assertEqual(ctx.exception.language_id, "cobol")
        self.assertIsInstance(ctx.exception, TreeSitterFileError)

    def test_language_aliases_resolve(self):
        self.assertEqual(TreeSitterFile.try_build(b"x = 1\n", "PY").language_id, "python")

    def test_grammar_that_cannot_bind_is_a_mismatch(self):
        register_language(_BrokenGrammar())
        try:
            with self.assertRaises(LanguageMismatch) as ctx:
                TreeSitterFile.try_build(b"anything", "brokenlang")
            self.assertIsInstance(ctx.exception.__cause__, ValueError)
        finally:
            unregister_language("brokenlang")

    def test_aborted_parse_is_a_timeout(self):
        def aborted(_src, progress_callback=None):
            raise ValueError("Parsing failed")

        with mock.patch("TreeSitterFile._new_parser", return_value=SimpleNamespace(parse=aborted)):
            with self.assertRaises(ParseTimeout) as ctx:
                TreeSitterFile.try_build(PYTHON_SAMPLE, "python", IntelligenceConfig(parse_timeout_micros=10))
        self.assertEqual(ctx.exception.timeout_micros, 10)

    def test_missing_tree_is_a_timeout(self):
        cancelled = SimpleNamespace(parse=lambda _src, progress_callback=None: None)
        with mock.patch("TreeSitterFile._new_parser", return_value=cancelled):
            with self.assertRaises(ParseTimeout):
                TreeSitterFile.try_build(PYTHON_SAMPLE, "python")

    def test_real_parse_exceeding_budget_times_out(self):
        big = python_source_of_size(500_000)
        with self.assertRaises(ParseTimeout) as ctx:
            TreeSitterFile.try_build(big, "python", IntelligenceConfig(parse_timeout_micros=1))
        self.assertEqual(ctx.exception.timeout_micros, 1)

    def test_parse_receives_a_deadline_callback(self):
        seen = {}

        def parse(src, progress_callback=None):
            seen["callback"] = progress_callback
            return None

        with mock.patch("TreeSitterFile._new_parser", return_value=SimpleNamespace(parse=parse)):
            with self.assertRaises(ParseTimeout):
                TreeSitterFile.try_build(PYTHON_SAMPLE, "python", IntelligenceConfig(parse_timeout_micros=1))
        # A one-microsecond budget is spent by the time the callback is inspected.
        self.assertTrue(seen["callback"](None))

    def test_small_file_parses_within_default_timeout(self):
        ts_file = TreeSitterFile.try_build(PYTHON_SAMPLE, "python")
        self.assertIn("def compute(values)", ts_file.filemap())


class FacadeTests(unittest.TestCase):
    def test_single_use(self):
        ts_file = TreeSitterFile.try_build(PYTHON_SAMPLE, "python")
        ts_file.filemap()
        with self.assertRaises(RuntimeError):
            ts_file.filemap()
        with self.assertRaises(RuntimeError):
            ts_file.get_definition([5], "sample.py")

    def test_hoverable_ranges_cover_identifiers(self):
        ranges = TreeSitterFile.try_build(PYTHON_SAMPLE, "python").hoverable_ranges()
        self.assertTrue(ranges)
        first = ranges[0]
        self.assertEqual((first.start.line, first.start.column, first.start.byte), (0, 7, 7))
        self.assertEqual(first.end.byte, 9)
        for rng in ranges:
            self.assertTrue(PYTHON_SAMPLE[rng.start.byte : rng.end.byte].decode("utf-8").isidentifier())

    def test_broken_query_surfaces_as_query_error(self):
        register_language(_BadQueryPython())
        try:
            ts_file = TreeSitterFile.try_build(PYTHON_SAMPLE, "badpython")
            with self.assertRaises(QueryError) as ctx:
                ts_file.hoverable_ranges()
            self.assertEqual((ctx.exception.language_id, ctx.exception.query_kind), ("badpython", "hoverable"))
        finally:
            unregister_language("badpython")

    def test_definition_for_row_inside_function(self):
        ts_file = TreeSitterFile.try_build(PYTHON_SAMPLE, "python")
        skeleton, definitions = ts_file.get_definition([5], "sample.py")
        self.assertEqual(definitions, [Definition.function_def("sample.py", 3, "compute")])
        self.assertTrue(skeleton.startswith("3 def compute(values):\n4     total = 0\n"))
        self.assertIn("10     return total\n", skeleton)
        self.assertNotIn("class Helper", skeleton)

    def test_row_zero_is_rejected(self):
        ts_file = TreeSitterFile.try_build(PYTHON_SAMPLE, "python")
        with self.assertRaises(ValueError):
            ts_file.get_definition([0], "sample.py")

    def test_invalid_utf8_body_raises_decode_error(self):
        ts_file = TreeSitterFile.try_build(INVALID_UTF8_SAMPLE, "python")
        with self.assertRaises(SourceDecodeError):
            ts_file.get_definition([5], "bad.py")

        # Signatures alone stay decodable.
        filemap = TreeSitterFile.try_build(INVALID_UTF8_SAMPLE, "python").filemap()
        self.assertEqual(filemap, "1   def ok(): ...\n4   def bad(): ...\n")


if __name__ == "__main__":
    unittest.main(verbosity=2)
