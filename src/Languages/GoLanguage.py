from __future__ import annotations

from language_registry import register_language
from Languages.TreeWalkingLanguage import TreeWalkingLanguage


class GoLanguage(TreeWalkingLanguage):
    language_id = "go"
    grammar_name = "go"
    aliases = ("golang",)
    file_extensions = ("go",)

    hoverable_query = """
(identifier) @hoverable
(type_identifier) @hoverable
(field_identifier) @hoverable
"""
    scope_query = """
(source_file) @local.scope
(function_declaration) @local.scope
(method_declaration) @local.scope
(func_literal) @local.scope
(block) @local.scope

(function_declaration name: (identifier) @local.definition.function)
(method_declaration name: (field_identifier) @local.definition.method)
(type_spec name: (type_identifier) @local.definition.struct)
(parameter_declaration name: (identifier) @local.definition.parameter)
(short_var_declaration left: (expression_list (identifier) @local.definition.variable))
(var_spec name: (identifier) @local.definition.variable)
(const_spec name: (identifier) @local.definition.const)

(import_spec path: (interpreted_string_literal) @local.import)

(identifier) @local.reference
(type_identifier) @local.reference
"""

    # `type X struct {...}` has no body field; it renders as its first line.
    class_types = frozenset({"type_declaration"})
    function_types = frozenset({"function_declaration", "method_declaration"})


register_language(GoLanguage())
