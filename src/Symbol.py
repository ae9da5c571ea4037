from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from text_range import TextRange


@dataclass(frozen=True)
class Symbol:
    """A definition discovered by the scope graph: a free-form kind tag plus its source range."""

    kind: str
    range: TextRange

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "range": self.range.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Symbol":
        return cls(kind=str(data["kind"]), range=TextRange.from_dict(data["range"]))
