"""
Render pipeline shared by every language.

A language walks its syntax tree and writes into an `OutputBuffer`. Before an
entity is rendered the walker takes a mark; when the entity turns out to be a
precise match the buffer is truncated back to that mark and the entity's full
body is written instead of the collapsed rendering.

Three entry points drive the walkers:
  - gen_filemap_impl: no entities, everything collapsed.
  - get_definition_impl: requested rows become single-line chunks.
  - complete_chunks_impl: caller-supplied chunks, caller-owned buffer.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from tree_sitter import Node

from CodeChunk import CodeChunkMiddle
from Definition import Definition, DefinitionKind
from entity_position import (
    EntityPosition,
    contains,
    is_definition_hitted,
    is_definition_only,
    is_intersecting,
    overlaps,
    precise_intersected,
    rows_to_chunks,
)
from intelligence_config import RenderConfig
from LineMapper import LineMapper
from treesitter_errors import SourceDecodeError

logger = logging.getLogger(__name__)


class BufferMark(NamedTuple):
    length: int
    last_line: Optional[int]


class OutputBuffer:
    """Append-only text builder that can be rewound to an earlier mark."""

    def __init__(self, initial: str = "") -> None:
        self._io = io.StringIO()
        self._io.write(initial)
        self._last_line: Optional[int] = None

    @property
    def last_line(self) -> Optional[int]:
        """Last 0-based source line that received a line-number prefix."""
        return self._last_line

    def note_line(self, line: Optional[int]) -> None:
        self._last_line = line

    def append(self, text: str) -> None:
        self._io.write(text)

    def mark(self) -> BufferMark:
        return BufferMark(self._io.tell(), self._last_line)

    def truncate(self, mark: BufferMark) -> None:
        self._io.seek(mark.length)
        self._io.truncate()
        self._last_line = mark.last_line

    def getvalue(self) -> str:
        return self._io.getvalue()

    def __len__(self) -> int:
        return self._io.tell()

    def __str__(self) -> str:
        return self.getvalue()


def decode_bytes(code: bytes, start: int, end: int) -> str:
    try:
        return code[start:end].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceDecodeError(start + exc.start, start + exc.end, exc.reason) from exc


def node_text(node: Node, code: bytes) -> str:
    return decode_bytes(code, node.start_byte, node.end_byte)


def split_lines(text: str) -> List[str]:
    """Split on LF, dropping CR line endings and a trailing empty line."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def result_append_impl(result: OutputBuffer, new_str: str) -> None:
    result.append(new_str)


def result_append_with_line_num(result: OutputBuffer, new_str: str, line: int) -> None:
    # Several fragments can come from one source line; number it only once.
    if line == result.last_line:
        result.append(new_str)
    else:
        result.append(f"{line + 1:<3} {new_str}")
        result.note_line(line)


def result_append(result: OutputBuffer, new_str: str, line: int, config: RenderConfig) -> None:
    if config.with_line_numbers:
        result_append_with_line_num(result, new_str, line)
    else:
        result_append_impl(result, new_str)


def get_body_impl(node: Node, code: bytes, indent: str, start: BufferMark, result: OutputBuffer) -> bool:
    result.truncate(start)
    result_append_impl(result, f"{indent} {node_text(node, code)}\n")
    return True


def get_body_with_line_num(node: Node, code: bytes, indent: str, start: BufferMark, result: OutputBuffer) -> bool:
    result.truncate(start)
    start_row = node.start_point[0] + 1
    body = "\n".join(
        f"{start_row + i} {indent}{line}" for i, line in enumerate(split_lines(node_text(node, code)))
    )
    result_append_impl(result, f"{body}\n")
    result.note_line(node.end_point[0])
    return True


def get_body(
    node: Node,
    code: bytes,
    indent: str,
    start: BufferMark,
    result: OutputBuffer,
    config: RenderConfig,
) -> bool:
    """Replace everything written since `start` with the node's full text."""
    if config.with_line_numbers:
        return get_body_with_line_num(node, code, indent, start, result)
    return get_body_impl(node, code, indent, start, result)


@dataclass
class RenderContext:
    """State for one pipeline invocation. Never reused across calls."""

    code: bytes
    path: str
    config: RenderConfig
    result: OutputBuffer
    entities: Sequence[EntityPosition] = ()
    chunks: Optional[Sequence[CodeChunkMiddle]] = None
    definitions: Optional[List[Definition]] = None
    # Insertion-ordered set of names already expanded.
    definition_symbols: Dict[str, None] = field(default_factory=dict)
    _lines: Optional[LineMapper] = field(default=None, repr=False)

    def definition_only(self) -> bool:
        return is_definition_only(self.definition_symbols, self.entities)

    def is_hit(self, name: str, start_line: int, end_line: int) -> bool:
        return is_definition_hitted(self.definition_symbols, self.entities, name, start_line, end_line)

    def encloses_precise(self, start_line: int, end_line: int) -> bool:
        span = EntityPosition(start_line, end_line)
        return any(entity != span and contains(span, entity) for entity in self.entities)

    def should_expand(self, start_line: int, end_line: int) -> bool:
        if self.chunks is None:
            return True
        return is_intersecting(self.chunks, start_line, end_line)

    def record_hit(self, kind: Optional[DefinitionKind], name: str, start_line: int) -> None:
        # Anonymous entities would otherwise make every later anonymous entity a hit.
        if not name:
            return
        first = name not in self.definition_symbols
        self.definition_symbols[name] = None
        if first and kind is not None and self.definitions is not None:
            self.definitions.append(Definition(kind, self.path, start_line + 1, name))

    def source_line(self, row: int) -> Optional[str]:
        if self._lines is None:
            self._lines = LineMapper(self.code)
        span = self._lines.line_span(row)
        if span is None:
            return None
        return decode_bytes(self.code, *span).rstrip("\r")

    def chunk_rows_within(self, start_line: int, end_line: int) -> List[int]:
        """Rows of the requested chunks that fall inside [start_line, end_line], in order."""
        rows: Dict[int, None] = {}
        for chunk in self.chunks or ():
            if not overlaps(chunk.start_line, chunk.end_line, start_line, end_line):
                continue
            for row in range(max(chunk.start_line, start_line), min(chunk.end_line, end_line) + 1):
                rows[row] = None
        return sorted(rows)


WalkTree = Callable[[Node, str, RenderContext], bool]
GetEntityPosition = Callable[[Node, bytes, List[EntityPosition]], None]


def gen_filemap_impl(node: Node, code: bytes, walk_tree: WalkTree, config: RenderConfig) -> str:
    result = OutputBuffer()
    ctx = RenderContext(code=code, path="", config=config, result=result)
    walk_tree(node, "", ctx)
    return result.getvalue()


def get_definition_impl(
    node: Node,
    code: bytes,
    rows: Sequence[int],
    path: str,
    walk_tree: WalkTree,
    get_entity_position: GetEntityPosition,
    config: RenderConfig,
) -> Tuple[str, List[Definition]]:
    code_chunks = rows_to_chunks(path, rows)
    en_positions: List[EntityPosition] = []
    get_entity_position(node, code, en_positions)
    precise = precise_intersected(en_positions, code_chunks)
    logger.debug(
        "get_definition %s: %d entities, %d precise for rows %s", path, len(en_positions), len(precise), list(rows)
    )

    result = OutputBuffer()
    definitions: List[Definition] = []
    ctx = RenderContext(
        code=code, path=path, config=config, result=result, entities=precise, definitions=definitions
    )
    walk_tree(node, "", ctx)
    return result.getvalue(), definitions


def complete_chunks_impl(
    node: Node,
    code: bytes,
    chunks: Sequence[CodeChunkMiddle],
    walk_tree: WalkTree,
    get_entity_position: GetEntityPosition,
    result: OutputBuffer,
    config: RenderConfig,
) -> None:
    en_positions: List[EntityPosition] = []
    get_entity_position(node, code, en_positions)
    precise = precise_intersected(en_positions, chunks)
    logger.debug("complete_chunks: %d entities, %d precise for %d chunks", len(en_positions), len(precise), len(chunks))

    # The buffer may already hold earlier output; line numbering starts fresh per call.
    result.note_line(None)
    path = chunks[0].path if chunks else ""
    ctx = RenderContext(code=code, path=path, config=config, result=result, entities=precise, chunks=chunks)
    walk_tree(node, "", ctx)


__all__ = [
    "BufferMark",
    "OutputBuffer",
    "RenderContext",
    "WalkTree",
    "GetEntityPosition",
    "decode_bytes",
    "node_text",
    "split_lines",
    "result_append",
    "get_body",
    "gen_filemap_impl",
    "get_definition_impl",
    "complete_chunks_impl",
]
