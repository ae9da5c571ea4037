"""Definitions reported by the definition-extraction pipeline.

Serialized as an adjacently tagged object::

    {"type": "function_def", "content": {"file_path": ..., "line_number": ..., "name": ...}}
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class DefinitionKind(str, Enum):
    FUNCTION_DEF = "function_def"
    CLASS_DEF = "class_def"


@dataclass(frozen=True)
class Definition:
    kind: DefinitionKind
    file_path: str
    line_number: int
    name: str

    @classmethod
    def function_def(cls, file_path: str, line_number: int, name: str) -> "Definition":
        return cls(DefinitionKind.FUNCTION_DEF, file_path, line_number, name)

    @classmethod
    def class_def(cls, file_path: str, line_number: int, name: str) -> "Definition":
        return cls(DefinitionKind.CLASS_DEF, file_path, line_number, name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "content": {
                "file_path": self.file_path,
                "line_number": self.line_number,
                "name": self.name,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Definition":
        tag = data.get("type")
        try:
            kind = DefinitionKind(tag)
        except ValueError as exc:
            raise ValueError(f"Unknown definition type {tag!r}") from exc
        content = data.get("content") or {}
        return cls(
            kind=kind,
            file_path=str(content["file_path"]),
            line_number=int(content["line_number"]),
            name=str(content["name"]),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "Definition":
        return cls.from_dict(json.loads(raw))


__all__ = ["Definition", "DefinitionKind"]
