"""
Entity/chunk intersection.

All spans are closed line intervals [start_line, end_line]; touching endpoints
overlap. Entities come from walking a syntax tree, chunks from the caller.
The central operation is `precise_intersected`: keep the entities that touch a
chunk and have no nested entity that touches one too (innermost wins).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Collection, List, Sequence

from CodeChunk import CodeChunkMiddle

# Enclosing spans wider than this are never expanded by chunk completion.
LARGE_SPAN_LINES = 100


@dataclass(frozen=True)
class EntityPosition:
    """Span of one syntactic entity. Equality and hashing ignore `entity_name`."""

    start_line: int
    end_line: int
    entity_name: str = field(default="", compare=False)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start <= b_end and b_start <= a_end


def contains(outer: EntityPosition, inner: EntityPosition) -> bool:
    return outer.start_line <= inner.start_line and outer.end_line >= inner.end_line


def intersects_any(entity: EntityPosition, chunks: Sequence[CodeChunkMiddle]) -> bool:
    for chunk in chunks:
        if overlaps(chunk.start_line, chunk.end_line, entity.start_line, entity.end_line):
            return True
    return False


def no_more_specific_match(
    entity: EntityPosition,
    entities: Sequence[EntityPosition],
    chunks: Sequence[CodeChunkMiddle],
) -> bool:
    """False when another entity nested in `entity` already touches the chunks."""
    for other in entities:
        if other != entity and intersects_any(other, chunks) and contains(entity, other):
            return False
    return True


def precise_intersected(
    entities: Sequence[EntityPosition],
    chunks: Sequence[CodeChunkMiddle],
) -> List[EntityPosition]:
    return [
        entity
        for entity in entities
        if intersects_any(entity, chunks) and no_more_specific_match(entity, entities, chunks)
    ]


def rows_to_chunks(path: str, rows: Sequence[int]) -> List[CodeChunkMiddle]:
    """Turn 1-based rows into single-line, 0-based chunks."""
    chunks: List[CodeChunkMiddle] = []
    for row in rows:
        if row < 1:
            raise ValueError(f"Rows are 1-based, got {row}")
        chunks.append(CodeChunkMiddle(path=path, text=path, alias=0, start_line=row - 1, end_line=row - 1))
    return chunks


def exact_span_match(entities: Sequence[EntityPosition], start_line: int, end_line: int) -> bool:
    for entity in entities:
        if entity.start_line == start_line and entity.end_line == end_line:
            return True
    return False


def is_intersecting(chunks: Sequence[CodeChunkMiddle], start_line: int, end_line: int) -> bool:
    """
    Overlap test used by chunk completion.

    A span that encloses the outer extent of the chunk list (first chunk's start
    to last chunk's end, in list order) and is more than LARGE_SPAN_LINES wide
    is reported as non-intersecting, whatever the per-chunk overlap says.
    """
    if chunks:
        first, last = chunks[0], chunks[-1]
        if (
            start_line <= first.start_line
            and end_line >= last.end_line
            and end_line - start_line > LARGE_SPAN_LINES
        ):
            return False
    for chunk in chunks:
        if overlaps(start_line, end_line, chunk.start_line, chunk.end_line):
            return True
    return False


def is_definition_only(definition_symbols: Collection[str], entities: Sequence[EntityPosition]) -> bool:
    return len(definition_symbols) > 0 or len(entities) > 0


def is_definition_hitted(
    definition_symbols: Collection[str],
    entities: Sequence[EntityPosition],
    symbol_name: str,
    start_line: int,
    end_line: int,
) -> bool:
    return symbol_name in definition_symbols or exact_span_match(entities, start_line, end_line)


__all__ = [
    "LARGE_SPAN_LINES",
    "EntityPosition",
    "overlaps",
    "contains",
    "intersects_any",
    "no_more_specific_match",
    "precise_intersected",
    "rows_to_chunks",
    "exact_span_match",
    "is_intersecting",
    "is_definition_only",
    "is_definition_hitted",
]
