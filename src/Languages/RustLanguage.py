from __future__ import annotations

from language_registry import register_language
from Languages.TreeWalkingLanguage import TreeWalkingLanguage


class RustLanguage(TreeWalkingLanguage):
    language_id = "rust"
    grammar_name = "rust"
    aliases = ("rs",)
    file_extensions = ("rs",)

    hoverable_query = """
(identifier) @hoverable
(type_identifier) @hoverable
(field_identifier) @hoverable
"""
    scope_query = """
(source_file) @local.scope
(function_item) @local.scope
(block) @local.scope
(closure_expression) @local.scope

(function_item name: (identifier) @local.definition.function)
(struct_item name: (type_identifier) @local.definition.struct)
(enum_item name: (type_identifier) @local.definition.enum)
(trait_item name: (type_identifier) @local.definition.interface)
(mod_item name: (identifier) @local.definition.module)
(const_item name: (identifier) @local.definition.const)
(static_item name: (identifier) @local.definition.const)
(let_declaration pattern: (identifier) @local.definition.variable)
(parameter pattern: (identifier) @local.definition.variable)

(use_declaration argument: (identifier) @local.import)
(use_declaration argument: (scoped_identifier name: (identifier) @local.import))

(identifier) @local.reference
(type_identifier) @local.reference
"""

    class_types = frozenset({"struct_item", "enum_item", "trait_item", "union_item"})
    function_types = frozenset({"function_item"})
    container_types = frozenset({"impl_item", "mod_item"})

    # impl blocks are named after the implementing type
    name_fields = ("name", "type")


register_language(RustLanguage())
