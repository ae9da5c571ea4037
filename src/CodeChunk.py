import json
from dataclasses import dataclass
from typing import Any, Dict


def _check_span(start_line: int, end_line: int) -> None:
    if start_line < 0 or end_line < 0:
        raise ValueError(f"Chunk lines must be non-negative, got {start_line}..{end_line}")
    if start_line > end_line:
        raise ValueError(f"Chunk start_line {start_line} is after end_line {end_line}")


@dataclass(frozen=True)
class CodeChunk:
    """An owned, serializable excerpt of a file. Lines are inclusive."""

    path: str
    alias: int
    snippet: str
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.alias < 0:
            raise ValueError(f"Chunk alias must be non-negative, got {self.alias}")
        _check_span(self.start_line, self.end_line)

    def is_empty(self) -> bool:
        """True if the snippet is empty or holds only whitespace."""
        return not self.snippet.strip()

    def to_middle(self) -> "CodeChunkMiddle":
        return CodeChunkMiddle(
            path=self.path,
            text=self.snippet,
            alias=self.alias,
            start_line=self.start_line,
            end_line=self.end_line,
        )

    def to_dict(self) -> Dict[str, Any]:
        # Field names are part of the wire format.
        return {
            "path": self.path,
            "alias": self.alias,
            "snippet": self.snippet,
            "start": self.start_line,
            "end": self.end_line,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodeChunk":
        return cls(
            path=str(data["path"]),
            alias=int(data["alias"]),
            snippet=str(data["snippet"]),
            start_line=int(data["start"]),
            end_line=int(data["end"]),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "CodeChunk":
        return cls.from_dict(json.loads(raw))

    def __str__(self) -> str:
        return f"{self.alias}: {self.path}\n{self.snippet}"


@dataclass(frozen=True)
class CodeChunkMiddle:
    """
    A view of a chunk used while rendering. `path` and `text` are the caller's
    own string objects; nothing is copied until `to_owned()` is called, and the
    view is only meant to live for one pipeline call.
    """

    path: str
    text: str
    alias: int
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        _check_span(self.start_line, self.end_line)

    def is_empty(self) -> bool:
        return not self.text.strip()

    def to_owned(self) -> CodeChunk:
        return CodeChunk(
            path=self.path,
            alias=self.alias,
            snippet=self.text,
            start_line=self.start_line,
            end_line=self.end_line,
        )

    def __str__(self) -> str:
        return f"{self.path}\n{self.text}"
