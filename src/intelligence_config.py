"""Guardrails and rendering options, overridable through TREELENS_* environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

MAX_FILE_BYTES = 500_000
PARSE_TIMEOUT_MICROS = 1_000_000
INDENT_STEP = "\t"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RenderConfig:
    with_line_numbers: bool = True
    indent_step: str = INDENT_STEP


@dataclass(frozen=True)
class IntelligenceConfig:
    max_file_bytes: int = MAX_FILE_BYTES
    parse_timeout_micros: int = PARSE_TIMEOUT_MICROS
    render: RenderConfig = field(default_factory=RenderConfig)


def _env_value(environ: Mapping[str, str], name: str) -> str:
    return (environ.get(name) or "").strip()


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _env_value(environ, name)
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _env_value(environ, name).lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> IntelligenceConfig:
    """Build an `IntelligenceConfig` from the environment, falling back to defaults."""
    env = os.environ if environ is None else environ
    indent = env.get("TREELENS_INDENT")
    render = RenderConfig(
        with_line_numbers=_env_bool(env, "TREELENS_LINE_NUMBERS", True),
        indent_step=indent if indent else INDENT_STEP,
    )
    return IntelligenceConfig(
        max_file_bytes=_env_int(env, "TREELENS_MAX_FILE_BYTES", MAX_FILE_BYTES),
        parse_timeout_micros=_env_int(env, "TREELENS_PARSE_TIMEOUT_MICROS", PARSE_TIMEOUT_MICROS),
        render=render,
    )


__all__ = [
    "MAX_FILE_BYTES",
    "PARSE_TIMEOUT_MICROS",
    "INDENT_STEP",
    "RenderConfig",
    "IntelligenceConfig",
    "load_config",
]
