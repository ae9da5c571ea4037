"""
Shared tree walker for the built-in languages.

A language subclass only declares its grammar, its two structural queries and
which node types count as classes, functions and plain containers. The walker
then renders, depth-first:

  * filemap mode: every entity collapsed to its signature plus a placeholder;
    classes/containers holding nested entities open a block and recurse.
  * definition/completion mode: entities that are definition hits are written
    in full (the buffer is rewound to the entity's mark first); entities that
    enclose a precise match render their header and recurse, and are rewound
    away again when nothing inside them was written; the rest is skipped.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Language, Node, Query
from tree_sitter_language_pack import get_language

from CodeChunk import CodeChunkMiddle
from Definition import Definition, DefinitionKind
from entity_position import EntityPosition
from intelligence_config import RenderConfig
from render import (
    OutputBuffer,
    RenderContext,
    complete_chunks_impl,
    decode_bytes,
    gen_filemap_impl,
    get_body,
    get_definition_impl,
    node_text,
    result_append,
    split_lines,
)

logger = logging.getLogger(__name__)

QUERY_KINDS = ("hoverable", "scope")


class TreeWalkingLanguage:
    language_id: str = ""
    grammar_name: str = ""
    aliases: Tuple[str, ...] = ()
    file_extensions: Tuple[str, ...] = ()

    hoverable_query: str = ""
    scope_query: str = ""

    class_types: frozenset[str] = frozenset()
    function_types: frozenset[str] = frozenset()
    # Entities that group definitions without being one (e.g. Rust impl blocks).
    container_types: frozenset[str] = frozenset()

    body_field: Optional[str] = "body"
    name_fields: Tuple[str, ...] = ("name",)

    block_open: str = " {"
    block_close: Optional[str] = "}"
    placeholder: str = " { ... }"

    def __init__(self) -> None:
        self._queries: Dict[str, Query] = {}
        self._lock = Lock()

    # ---------------- capability table ----------------

    def grammar(self) -> Language:
        return get_language(self.grammar_name)

    def query(self, kind: str) -> Query:
        """Compile (once) and return the `hoverable` or `scope` query.

        Raises:
            tree_sitter.QueryError: when the query source does not compile.
        """
        if kind not in QUERY_KINDS:
            raise KeyError(f"Unknown query kind '{kind}'")
        cached = self._queries.get(kind)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._queries.get(kind)
            if cached is None:
                source = self.hoverable_query if kind == "hoverable" else self.scope_query
                cached = Query(self.grammar(), source)
                self._queries[kind] = cached
        return cached

    def filemap(self, root: Node, code: bytes, config: RenderConfig) -> str:
        return gen_filemap_impl(root, code, self.walk_tree, config)

    def get_definition(
        self, root: Node, code: bytes, rows: Sequence[int], path: str, config: RenderConfig
    ) -> Tuple[str, List[Definition]]:
        return get_definition_impl(root, code, rows, path, self.walk_tree, self.get_entity_position, config)

    def complete_chunks(
        self,
        root: Node,
        code: bytes,
        chunks: Sequence[CodeChunkMiddle],
        result: OutputBuffer,
        config: RenderConfig,
    ) -> None:
        complete_chunks_impl(root, code, chunks, self.walk_tree, self.get_entity_position, result, config)

    # ---------------- classification ----------------

    def is_entity(self, node: Node) -> bool:
        t = node.type
        return t in self.function_types or t in self.class_types or t in self.container_types

    def entity_kind(self, node: Node) -> Optional[DefinitionKind]:
        if node.type in self.function_types:
            return DefinitionKind.FUNCTION_DEF
        if node.type in self.class_types:
            return DefinitionKind.CLASS_DEF
        return None

    def entity_name(self, node: Node, code: bytes) -> str:
        for field_name in self.name_fields:
            child = node.child_by_field_name(field_name)
            if child is not None:
                return node_text(child, code)
        # e.g. Go `type_declaration` -> `type_spec name:`
        for child in node.named_children:
            inner = child.child_by_field_name("name")
            if inner is not None:
                return node_text(inner, code)
        return ""

    def body_node(self, node: Node) -> Optional[Node]:
        if not self.body_field:
            return None
        return node.child_by_field_name(self.body_field)

    def get_entity_position(self, node: Node, code: bytes, positions: List[EntityPosition]) -> None:
        """Append every entity under `node` in document order."""
        stack = [node]
        while stack:
            current = stack.pop()
            if self.is_entity(current):
                positions.append(
                    EntityPosition(current.start_point[0], current.end_point[0], self.entity_name(current, code))
                )
            stack.extend(reversed(current.named_children))

    def _outermost_entities(self, node: Node) -> Iterator[Node]:
        stack = [node]
        while stack:
            current = stack.pop()
            if self.is_entity(current):
                yield current
                continue
            stack.extend(reversed(current.named_children))

    def _has_nested_entities(self, node: Node) -> bool:
        container = self.body_node(node) or node
        for child in container.named_children:
            for _ in self._outermost_entities(child):
                return True
        return False

    # ---------------- walking ----------------

    def walk_tree(self, node: Node, indent: str, ctx: RenderContext) -> bool:
        """Render the entities under `node`; True if anything was written."""
        emitted = False
        for entity in self._outermost_entities(node):
            if self._walk_entity(entity, indent, ctx):
                emitted = True
        return emitted

    def _walk_children(self, node: Node, indent: str, ctx: RenderContext) -> bool:
        container = self.body_node(node) or node
        emitted = False
        for child in container.named_children:
            if self.walk_tree(child, indent, ctx):
                emitted = True
        return emitted

    def _walk_entity(self, node: Node, indent: str, ctx: RenderContext) -> bool:
        if not ctx.definition_only():
            return self._render_skeleton(node, indent, ctx)

        start_line, end_line = node.start_point[0], node.end_point[0]
        name = self.entity_name(node, ctx.code)
        hit = ctx.is_hit(name, start_line, end_line)
        if not hit and not ctx.encloses_precise(start_line, end_line):
            return False

        mark = ctx.result.mark()
        header_rows = self._emit_signature(node, indent, ctx, self._open_suffix(node))
        if hit:
            if ctx.should_expand(start_line, end_line):
                get_body(node, ctx.code, indent, mark, ctx.result, ctx.config)
            else:
                self._emit_excerpt(node, indent, ctx, start_line + header_rows)
                self._emit_close(node, indent, ctx)
            ctx.record_hit(self.entity_kind(node), name, start_line)
            return True

        if not self._walk_children(node, indent + ctx.config.indent_step, ctx):
            logger.debug("Rewinding %s '%s' at line %d: nothing rendered inside", node.type, name, start_line + 1)
            ctx.result.truncate(mark)
            return False
        self._emit_close(node, indent, ctx)
        return True

    def _render_skeleton(self, node: Node, indent: str, ctx: RenderContext) -> bool:
        if node.type in self.function_types or not self._has_nested_entities(node):
            self._emit_signature(node, indent, ctx, self._collapsed_suffix(node, ctx.code))
            return True
        self._emit_signature(node, indent, ctx, self._open_suffix(node))
        self._walk_children(node, indent + ctx.config.indent_step, ctx)
        self._emit_close(node, indent, ctx)
        return True

    # ---------------- fragments ----------------

    def signature(self, node: Node, code: bytes) -> str:
        """Entity text up to its body; first line only when there is no body."""
        body = self.body_node(node)
        if body is not None:
            return decode_bytes(code, node.start_byte, body.start_byte).rstrip()
        return split_lines(node_text(node, code))[0].rstrip()

    def _open_suffix(self, node: Node) -> str:
        return self.block_open if self.body_node(node) is not None else ""

    def _collapsed_suffix(self, node: Node, code: bytes) -> str:
        if self.body_node(node) is not None:
            return self.placeholder
        if self.block_close and self.signature(node, code).endswith("{"):
            return f" ... {self.block_close}"
        return ""

    def _emit_signature(self, node: Node, indent: str, ctx: RenderContext, suffix: str) -> int:
        """Write the signature lines; return how many source rows they cover."""
        lines = split_lines(self.signature(node, ctx.code))
        first_row = node.start_point[0]
        continuation = indent + ctx.config.indent_step
        for i, line in enumerate(lines):
            text = f"{indent}{line}" if i == 0 else f"{continuation}{line.strip()}"
            if i == len(lines) - 1:
                text += suffix
            result_append(ctx.result, f"{text}\n", first_row + i, ctx.config)
        return len(lines)

    def _emit_close(self, node: Node, indent: str, ctx: RenderContext) -> None:
        if self.block_close and self.body_node(node) is not None:
            result_append(ctx.result, f"{indent}{self.block_close}\n", node.end_point[0], ctx.config)

    def _emit_excerpt(self, node: Node, indent: str, ctx: RenderContext, first_body_row: int) -> None:
        """Write only the requested chunk lines inside `node`, eliding the gaps."""
        gap = f"{indent}{ctx.config.indent_step}...\n"
        previous: Optional[int] = None
        for row in ctx.chunk_rows_within(first_body_row, node.end_point[0]):
            line = ctx.source_line(row)
            if line is None:
                continue
            if previous is None or row != previous + 1:
                ctx.result.append(gap)
            result_append(ctx.result, f"{line}\n", row, ctx.config)
            previous = row
        if previous is not None and previous < node.end_point[0] - 1:
            ctx.result.append(gap)


__all__ = ["TreeWalkingLanguage", "QUERY_KINDS"]
