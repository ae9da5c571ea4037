from __future__ import annotations

from language_registry import register_language
from Languages.TreeWalkingLanguage import TreeWalkingLanguage


class JavaScriptLanguage(TreeWalkingLanguage):
    language_id = "javascript"
    grammar_name = "javascript"
    aliases = ("js", "jsx")
    file_extensions = ("js", "jsx", "mjs", "cjs")

    hoverable_query = """
(identifier) @hoverable
(property_identifier) @hoverable
(shorthand_property_identifier) @hoverable
"""
    scope_query = """
(program) @local.scope
(function_declaration) @local.scope
(function_expression) @local.scope
(arrow_function) @local.scope
(method_definition) @local.scope
(class_declaration) @local.scope
(statement_block) @local.scope

(function_declaration name: (identifier) @local.definition.function)
(generator_function_declaration name: (identifier) @local.definition.function)
(class_declaration name: (identifier) @local.definition.class)
(method_definition name: (property_identifier) @local.definition.method)
(variable_declarator name: (identifier) @local.definition.variable)
(formal_parameters (identifier) @local.definition.parameter)

(import_specifier name: (identifier) @local.import)
(namespace_import (identifier) @local.import)
(import_clause (identifier) @local.import)

(identifier) @local.reference
"""

    class_types = frozenset({"class_declaration", "class"})
    function_types = frozenset({"function_declaration", "generator_function_declaration", "method_definition"})


register_language(JavaScriptLanguage())
