from __future__ import annotations

from language_registry import register_language
from Languages.TreeWalkingLanguage import TreeWalkingLanguage


class PythonLanguage(TreeWalkingLanguage):
    language_id = "python"
    grammar_name = "python"
    aliases = ("py", "python3")
    file_extensions = ("py", "pyi")

    hoverable_query = "(identifier) @hoverable"
    scope_query = """
(module) @local.scope
(function_definition) @local.scope
(class_definition) @local.scope
(lambda) @local.scope

(function_definition name: (identifier) @local.definition.function)
(class_definition name: (identifier) @local.definition.class)
(parameters (identifier) @local.definition.parameter)
(default_parameter name: (identifier) @local.definition.parameter)
(typed_parameter (identifier) @local.definition.parameter)
(assignment left: (identifier) @local.definition.variable)
(for_statement left: (identifier) @local.definition.variable)

(import_statement name: (dotted_name (identifier) @local.import))
(import_from_statement name: (dotted_name (identifier) @local.import))
(aliased_import alias: (identifier) @local.import)

(identifier) @local.reference
"""

    class_types = frozenset({"class_definition"})
    function_types = frozenset({"function_definition"})

    block_open = ""
    block_close = None
    placeholder = " ..."


register_language(PythonLanguage())
