from __future__ import annotations

from language_registry import register_language
from Languages.TreeWalkingLanguage import TreeWalkingLanguage


class JavaLanguage(TreeWalkingLanguage):
    language_id = "java"
    grammar_name = "java"
    file_extensions = ("java",)

    hoverable_query = """
(identifier) @hoverable
(type_identifier) @hoverable
"""
    scope_query = """
(program) @local.scope
(class_declaration) @local.scope
(interface_declaration) @local.scope
(method_declaration) @local.scope
(constructor_declaration) @local.scope
(block) @local.scope

(class_declaration name: (identifier) @local.definition.class)
(interface_declaration name: (identifier) @local.definition.interface)
(enum_declaration name: (identifier) @local.definition.enum)
(method_declaration name: (identifier) @local.definition.method)
(formal_parameter name: (identifier) @local.definition.parameter)
(local_variable_declaration declarator: (variable_declarator name: (identifier) @local.definition.variable))
(field_declaration declarator: (variable_declarator name: (identifier) @local.definition.field))

(import_declaration (scoped_identifier name: (identifier) @local.import))

(identifier) @local.reference
(type_identifier) @local.reference
"""

    class_types = frozenset({"class_declaration", "interface_declaration", "enum_declaration", "record_declaration"})
    function_types = frozenset({"method_declaration", "constructor_declaration"})


register_language(JavaLanguage())
