"""Line/column/byte positions over a source buffer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from tree_sitter import Node


@dataclass(frozen=True, order=True)
class Point:
    line: int
    column: int
    byte: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "byte": self.byte}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        return cls(line=int(data["line"]), column=int(data["column"]), byte=int(data["byte"]))


@dataclass(frozen=True, order=True)
class TextRange:
    start: Point
    end: Point

    @classmethod
    def from_node(cls, node: Node) -> "TextRange":
        """Build a range from a tree-sitter node (rows and columns stay 0-based)."""
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return cls(
            start=Point(start_row, start_col, node.start_byte),
            end=Point(end_row, end_col, node.end_byte),
        )

    def contains(self, other: "TextRange") -> bool:
        return self.start.byte <= other.start.byte and other.end.byte <= self.end.byte

    def byte_span(self) -> tuple[int, int]:
        return self.start.byte, self.end.byte

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextRange":
        return cls(start=Point.from_dict(data["start"]), end=Point.from_dict(data["end"]))
