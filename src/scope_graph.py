"""
Lexical scope graph built from a language's `scope` query.

Capture names understood by the generic resolution method:

    @local.scope                  a node that opens a scope
    @local.definition[.<kind>]    a definition; <kind> becomes Symbol.kind
    @local.import                 an imported name (definition of kind "import")
    @local.reference              an identifier use

Definitions land in the innermost scope that contains them, except when the
definition names the node that opens that scope (a function's own name); those
are hoisted into the parent scope so siblings can see them. References resolve
to the nearest definition of the same name, walking scopes outward.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node, Query, QueryCursor

from render import node_text
from Symbol import Symbol
from text_range import TextRange

logger = logging.getLogger(__name__)

SCOPE_CAPTURE = "local.scope"
DEFINITION_CAPTURE = "local.definition"
IMPORT_CAPTURE = "local.import"
REFERENCE_CAPTURE = "local.reference"


@dataclass(frozen=True)
class LocalScope:
    range: TextRange
    parent: Optional[int]


@dataclass(frozen=True)
class LocalDef:
    name: str
    kind: str
    range: TextRange
    scope: int


@dataclass(frozen=True)
class Reference:
    name: str
    range: TextRange
    scope: int
    definition: Optional[int]


class ScopeGraph:
    def __init__(self, root_range: TextRange, language_id: str) -> None:
        self.language_id = language_id
        self.scopes: List[LocalScope] = [LocalScope(root_range, None)]
        self.definitions: List[LocalDef] = []
        self.imports: List[LocalDef] = []
        self.references: List[Reference] = []
        self._by_scope: Dict[int, Dict[str, List[int]]] = {}

    def innermost_scope(self, rng: TextRange) -> int:
        best = 0
        for idx, scope in enumerate(self.scopes):
            if scope.range.contains(rng) and self.scopes[best].range.contains(scope.range):
                best = idx
        return best

    def insert_local_scope(self, rng: TextRange) -> int:
        if rng == self.scopes[0].range:
            return 0
        parent = self.innermost_scope(rng)
        self.scopes.append(LocalScope(rng, parent))
        return len(self.scopes) - 1

    def insert_local_def(self, name: str, kind: str, rng: TextRange, owner: Optional[TextRange]) -> int:
        scope = self.innermost_scope(rng)
        if owner is not None and self.scopes[scope].range == owner and self.scopes[scope].parent is not None:
            scope = self.scopes[scope].parent
        local = LocalDef(name, kind, rng, scope)
        if kind == "import":
            self.imports.append(local)
        self.definitions.append(local)
        idx = len(self.definitions) - 1
        self._by_scope.setdefault(scope, {}).setdefault(name, []).append(idx)
        return idx

    def insert_ref(self, name: str, rng: TextRange) -> Reference:
        scope = self.innermost_scope(rng)
        ref = Reference(name, rng, scope, self._resolve(name, scope))
        self.references.append(ref)
        return ref

    def _resolve(self, name: str, scope: Optional[int]) -> Optional[int]:
        while scope is not None:
            candidates = self._by_scope.get(scope, {}).get(name)
            if candidates:
                return candidates[0]
            scope = self.scopes[scope].parent
        return None

    def symbols(self) -> List[Symbol]:
        """Every definition as a `Symbol`, in source order."""
        ordered = sorted(self.definitions, key=lambda d: d.range.byte_span())
        return [Symbol(kind=d.kind, range=d.range) for d in ordered]

    def definition_for(self, reference: Reference) -> Optional[LocalDef]:
        if reference.definition is None:
            return None
        return self.definitions[reference.definition]

    def references_to(self, symbol: Symbol) -> List[TextRange]:
        targets = {i for i, d in enumerate(self.definitions) if d.range == symbol.range}
        return [r.range for r in self.references if r.definition in targets]


class ResolutionMethod(Enum):
    GENERIC = "generic"

    def build_scope(self, query: Query, root: Node, src: bytes, language_id: str) -> ScopeGraph:
        graph = ScopeGraph(TextRange.from_node(root), language_id)
        captures = QueryCursor(query).captures(root)

        scopes: List[Node] = []
        definitions: List[Tuple[Node, str]] = []
        imports: List[Node] = []
        references: List[Node] = []
        for capture, nodes in captures.items():
            if capture == SCOPE_CAPTURE:
                scopes.extend(nodes)
            elif capture == DEFINITION_CAPTURE or capture.startswith(DEFINITION_CAPTURE + "."):
                kind = capture[len(DEFINITION_CAPTURE) + 1:]
                definitions.extend((node, kind) for node in nodes)
            elif capture == IMPORT_CAPTURE:
                imports.extend(nodes)
            elif capture == REFERENCE_CAPTURE:
                references.extend(nodes)

        # Outer scopes first so every scope finds its parent already inserted.
        for node in sorted(scopes, key=lambda n: (n.start_byte, -n.end_byte)):
            graph.insert_local_scope(TextRange.from_node(node))

        defined: set[Tuple[int, int]] = set()
        for node, kind in sorted(definitions, key=lambda item: item[0].start_byte):
            rng = TextRange.from_node(node)
            if rng.byte_span() in defined:
                continue
            owner = TextRange.from_node(node.parent) if node.parent is not None else None
            graph.insert_local_def(node_text(node, src), kind, rng, owner)
            defined.add(rng.byte_span())
        for node in sorted(imports, key=lambda n: n.start_byte):
            rng = TextRange.from_node(node)
            if rng.byte_span() in defined:
                continue
            graph.insert_local_def(node_text(node, src), "import", rng, None)
            defined.add(rng.byte_span())

        for node in sorted(references, key=lambda n: n.start_byte):
            rng = TextRange.from_node(node)
            if rng.byte_span() in defined:
                continue
            graph.insert_ref(node_text(node, src), rng)

        logger.debug(
            "Scope graph for %s: %d scopes, %d definitions, %d references",
            language_id,
            len(graph.scopes),
            len(graph.definitions),
            len(graph.references),
        )
        return graph


__all__ = ["ScopeGraph", "ResolutionMethod", "LocalScope", "LocalDef", "Reference"]
