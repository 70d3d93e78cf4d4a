"""Planner configuration — difficulty profile and optimizer limits.

A :class:`PlannerConfig` is an immutable value threaded through a single
planning call, so changing the difficulty on one planner never leaks into
a computation already in flight.

Values can be loaded from a YAML mapping (see ``configs/planner.yaml``)::

    difficulty: advanced
    prune_threshold: 300
    chunk_threshold: 64
    chunk_size: 32
    chunk_overlap: 4

Keys that are absent keep their defaults; unknown keys are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml


class Difficulty(str, Enum):
    """Player level used to scale transition costs."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: str | Difficulty) -> Difficulty:
        """Accept an enum member or its (case-insensitive) name.

        Raises:
            ValueError: If *value* names no known level.
        """
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(level.value for level in cls)
            raise ValueError(
                f"Unknown difficulty level '{value}' (expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class PlannerConfig:
    """Settings read once at the start of every planning call."""

    difficulty: Difficulty = Difficulty.INTERMEDIATE
    prune_threshold: float = 300.0
    chunk_threshold: int = 64
    chunk_size: int = 32
    chunk_overlap: int = 4

    def with_difficulty(self, level: str | Difficulty) -> PlannerConfig:
        return replace(self, difficulty=Difficulty.parse(level))


DEFAULT_CONFIG = PlannerConfig()


def config_from_mapping(data: dict[str, Any], source: str = "<mapping>") -> PlannerConfig:
    """Build a :class:`PlannerConfig` from a plain mapping.

    Args:
        data: Key/value pairs named after the ``PlannerConfig`` fields.
        source: Label used in error messages (usually the file path).

    Returns:
        A validated configuration.

    Raises:
        ValueError: On unknown keys or out-of-range values.
    """
    known = {f.name for f in fields(PlannerConfig)}
    for key in data:
        if key not in known:
            raise ValueError(f"Unknown key '{key}' in planner config: {source}")

    kwargs: dict[str, Any] = {}
    if "difficulty" in data:
        kwargs["difficulty"] = Difficulty.parse(data["difficulty"])
    if "prune_threshold" in data:
        kwargs["prune_threshold"] = float(data["prune_threshold"])
    for key in ("chunk_threshold", "chunk_size", "chunk_overlap"):
        if key in data:
            kwargs[key] = int(data[key])

    config = PlannerConfig(**kwargs)

    if config.chunk_size <= 0:
        raise ValueError(f"'chunk_size' must be positive in planner config: {source}")
    if not 0 <= config.chunk_overlap < config.chunk_size:
        raise ValueError(
            f"'chunk_overlap' must be in [0, chunk_size) in planner config: {source}"
        )
    if config.chunk_threshold < 1:
        raise ValueError(f"'chunk_threshold' must be at least 1 in planner config: {source}")

    return config


def load_config(config_path: str | Path | None = None) -> PlannerConfig:
    """Load planner settings from a YAML file.

    Args:
        config_path: Path to the YAML file. ``None`` returns the defaults.

    Returns:
        The parsed :class:`PlannerConfig`.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        ValueError: If the document is not a mapping or holds bad values.
    """
    if config_path is None:
        return DEFAULT_CONFIG

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Planner config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ValueError(
            f"Planner config must be a YAML mapping, got {type(data).__name__}: {config_path}"
        )

    return config_from_mapping(data, source=str(config_path))
