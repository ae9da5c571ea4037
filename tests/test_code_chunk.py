import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from CodeChunk import CodeChunk, CodeChunkMiddle  # type: ignore
from Definition import Definition, DefinitionKind  # type: ignore
from Symbol import Symbol  # type: ignore
from text_range import Point, TextRange  # type: ignore


class CodeChunkTests(unittest.TestCase):
    def setUp(self):
        self.chunk = CodeChunk(path="pkg/mod.py", alias=2, snippet="x = 1\n", start_line=4, end_line=4)

    def test_wire_keys(self):
        self.assertEqual(
            self.chunk.to_dict(),
            {"path": "pkg/mod.py", "alias": 2, "snippet": "x = 1\n", "start": 4, "end": 4},
        )

    def test_json_round_trip(self):
        raw = self.chunk.to_json()
        self.assertEqual(json.loads(raw)["start"], 4)
        self.assertEqual(CodeChunk.from_json(raw), self.chunk)

    def test_is_empty_means_whitespace_only(self):
        self.assertTrue(CodeChunk("a", 0, " \t\n", 0, 0).is_empty())
        self.assertTrue(CodeChunk("a", 0, "", 0, 0).is_empty())
        self.assertFalse(CodeChunk("a", 0, "x", 0, 0).is_empty())

    def test_string_forms(self):
        self.assertEqual(str(self.chunk), "2: pkg/mod.py\nx = 1\n")
        self.assertEqual(str(self.chunk.to_middle()), "pkg/mod.py\nx = 1\n")

    def test_middle_and_owned_convert_both_ways(self):
        middle = self.chunk.to_middle()
        self.assertEqual((middle.start_line, middle.end_line, middle.alias), (4, 4, 2))
        self.assertIs(middle.text, self.chunk.snippet)
        self.assertEqual(middle.to_owned(), self.chunk)

    def test_invalid_spans_are_rejected(self):
        with self.assertRaises(ValueError):
            CodeChunk("a", 0, "", 5, 4)
        with self.assertRaises(ValueError):
            CodeChunk("a", -1, "", 0, 0)
        with self.assertRaises(ValueError):
            CodeChunkMiddle("a", "", 0, -1, 0)


class DefinitionTests(unittest.TestCase):
    def test_adjacently_tagged_form(self):
        definition = Definition.function_def("sample.py", 3, "compute")
        self.assertEqual(
            definition.to_dict(),
            {"type": "function_def", "content": {"file_path": "sample.py", "line_number": 3, "name": "compute"}},
        )
        self.assertEqual(Definition.class_def("a.py", 1, "A").to_dict()["type"], "class_def")

    def test_from_dict_and_json(self):
        definition = Definition.class_def("a.py", 7, "Helper")
        self.assertEqual(Definition.from_dict(definition.to_dict()), definition)
        self.assertEqual(Definition.from_json(definition.to_json()), definition)
        self.assertIs(Definition.from_json(definition.to_json()).kind, DefinitionKind.CLASS_DEF)

    def test_unknown_tag_is_rejected(self):
        with self.assertRaises(ValueError):
            Definition.from_dict({"type": "module_def", "content": {"file_path": "a", "line_number": 1, "name": "m"}})


class SymbolTests(unittest.TestCase):
    def test_to_dict(self):
        rng = TextRange(Point(1, 4, 12), Point(1, 11, 19))
        symbol = Symbol("function", rng)
        self.assertEqual(
            symbol.to_dict(),
            {
                "kind": "function",
                "range": {
                    "start": {"line": 1, "column": 4, "byte": 12},
                    "end": {"line": 1, "column": 11, "byte": 19},
                },
            },
        )
        self.assertEqual(Symbol.from_dict(symbol.to_dict()), symbol)

    def test_range_containment_is_byte_based(self):
        outer = TextRange(Point(0, 0, 0), Point(3, 0, 40))
        inner = TextRange(Point(1, 2, 10), Point(1, 5, 13))
        self.assertTrue(outer.contains(inner))
        self.assertFalse(inner.contains(outer))
        self.assertEqual(inner.byte_span(), (10, 13))


if __name__ == "__main__":
    unittest.main(verbosity=2)
