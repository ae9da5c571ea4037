"""Errors raised while building or querying a `TreeSitterFile`.

Every error is terminal for the call that raised it: callers either skip the
file or surface the error upward.
"""
from __future__ import annotations


class TreeSitterFileError(Exception):
    """Base class for all parse/query/render failures."""


class UnsupportedLanguage(TreeSitterFileError):
    def __init__(self, language_id: str) -> None:
        super().__init__(f"No grammar registered for language '{language_id}'")
        self.language_id = language_id


class FileTooLarge(TreeSitterFileError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Source is {size} bytes; limit is {limit}")
        self.size = size
        self.limit = limit


class LanguageMismatch(TreeSitterFileError):
    def __init__(self, language_id: str) -> None:
        super().__init__(f"Grammar for '{language_id}' could not be bound to the parser")
        self.language_id = language_id


class ParseTimeout(TreeSitterFileError):
    def __init__(self, timeout_micros: int) -> None:
        super().__init__(f"Parsing exceeded {timeout_micros} microseconds")
        self.timeout_micros = timeout_micros


class QueryError(TreeSitterFileError):
    """A structural query failed to compile; the tree-sitter error is the __cause__."""

    def __init__(self, language_id: str, query_kind: str, reason: str) -> None:
        super().__init__(f"{query_kind} query for '{language_id}' failed: {reason}")
        self.language_id = language_id
        self.query_kind = query_kind


class SourceDecodeError(TreeSitterFileError):
    def __init__(self, start_byte: int, end_byte: int, reason: str) -> None:
        super().__init__(f"Source bytes {start_byte}..{end_byte} are not valid UTF-8: {reason}")
        self.start_byte = start_byte
        self.end_byte = end_byte


__all__ = [
    "TreeSitterFileError",
    "UnsupportedLanguage",
    "FileTooLarge",
    "LanguageMismatch",
    "ParseTimeout",
    "QueryError",
    "SourceDecodeError",
]
