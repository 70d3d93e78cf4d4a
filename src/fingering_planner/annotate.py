"""Annotator — load planner input from JSON, run the planner, export results.

Input files carry the upstream layer's output::

    {
      "notes": [
        {"pitch": 60, "hand": "RH", "measure_number": 1},
        {"pitch": 48, "hand": "LH", "measure_number": 1},
        ...
      ],
      "patterns": [
        {"start_index": 1, "end_index": 4, "pattern_type": "SCALE"}
      ]
    }

Responsibilities:
    1. Load and validate notes and pattern segments.
    2. Call the planner.
    3. Save ``<stem>_fingering.json`` into the output directory.
    4. Offer the result as a ``pandas.DataFrame`` or JSON bytes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from .config import DEFAULT_CONFIG, PlannerConfig
from .models import FingeringSolution, Hand, Note, PatternSegment, PatternType
from .planner import plan_fingering


# ── Validation constants ──────────────────────────────────────
_HAND_ALIASES: dict[str, Hand] = {
    "RH": Hand.RH,
    "R": Hand.RH,
    "LH": Hand.LH,
    "L": Hand.LH,
}
_NOTE_KEYS: tuple[str, ...] = ("pitch", "hand")
_PATTERN_KEYS: tuple[str, ...] = ("start_index", "end_index", "pattern_type")


def _parse_note(entry: Any, i: int, source: str) -> Note:
    if not isinstance(entry, dict):
        raise ValueError(f"Note {i} in '{source}' must be an object")
    for key in _NOTE_KEYS:
        if key not in entry:
            raise ValueError(f"Note {i} in '{source}' is missing required key '{key}'")

    hand = _HAND_ALIASES.get(str(entry["hand"]).upper())
    if hand is None:
        raise ValueError(
            f"Note {i} in '{source}': hand must be 'RH' or 'LH', got '{entry['hand']}'"
        )

    return Note(
        pitch=int(entry["pitch"]),
        hand=hand,
        measure_number=int(entry.get("measure_number", 0)),
    )


def _parse_pattern(entry: Any, i: int, source: str) -> PatternSegment:
    if not isinstance(entry, dict):
        raise ValueError(f"Pattern {i} in '{source}' must be an object")
    for key in _PATTERN_KEYS:
        if key not in entry:
            raise ValueError(f"Pattern {i} in '{source}' is missing required key '{key}'")

    return PatternSegment(
        start_index=int(entry["start_index"]),
        end_index=int(entry["end_index"]),
        pattern_type=PatternType.parse(entry["pattern_type"]),
    )


def parse_document(
    data: Any, source: str = "<document>"
) -> tuple[list[Note], list[PatternSegment]]:
    """Validate a decoded JSON document.

    A bare list is read as notes without patterns.

    Raises:
        ValueError: If the document or any entry is malformed.
    """
    if isinstance(data, list):
        data = {"notes": data}
    if not isinstance(data, dict):
        raise ValueError(
            f"Input must be a JSON object or array, got {type(data).__name__}: {source}"
        )
    if "notes" not in data:
        raise ValueError(f"Input is missing required key 'notes': {source}")

    raw_notes = data["notes"]
    raw_patterns = data.get("patterns") or []
    if not isinstance(raw_notes, list) or not isinstance(raw_patterns, list):
        raise ValueError(f"'notes' and 'patterns' must be arrays: {source}")

    notes = [_parse_note(entry, i, source) for i, entry in enumerate(raw_notes)]
    patterns = [_parse_pattern(entry, i, source) for i, entry in enumerate(raw_patterns)]
    return notes, patterns


def load_notes(json_path: str | Path) -> tuple[list[Note], list[PatternSegment]]:
    """Load notes and pattern segments from a JSON file.

    Args:
        json_path: Path to the input document.

    Returns:
        ``(notes, patterns)`` in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or an entry is malformed.
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse '{path.name}' as JSON: {exc}") from exc

    return parse_document(data, source=path.name)


def solution_records(
    notes: Sequence[Note], solution: FingeringSolution
) -> list[dict[str, Any]]:
    """One dict per note: position, pitch, hand, measure, finger, explanation."""
    return [
        {
            "index": i,
            "pitch": note.pitch,
            "hand": note.hand.value,
            "measure_number": note.measure_number,
            "finger": finger,
            "explanation": explanation,
        }
        for i, (note, finger, explanation) in enumerate(
            zip(notes, solution.fingering, solution.explanations)
        )
    ]


def annotations_frame(notes: Sequence[Note], solution: FingeringSolution) -> pd.DataFrame:
    """Tabulate a solution, one row per note."""
    columns = ["index", "pitch", "hand", "measure_number", "finger", "explanation"]
    return pd.DataFrame(solution_records(notes, solution), columns=columns)


def solution_to_json_bytes(notes: Sequence[Note], solution: FingeringSolution) -> bytes:
    """Serialise a solution to UTF-8 JSON bytes."""
    payload = {
        "total_cost": solution.total_cost,
        "notes": solution_records(notes, solution),
        "path": [state.to_dict() for state in solution.path],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def annotate(
    input_path: str | Path,
    output_dir: str | Path | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> tuple[list[Note], FingeringSolution]:
    """Plan fingering for a JSON note file and optionally save the result.

    Args:
        input_path: Path to the input document.
        output_dir: Directory for ``<stem>_fingering.json``. Nothing is
            written when ``None``.
        config: Planner settings.

    Returns:
        The loaded notes and the solution.
    """
    input_path = Path(input_path)
    notes, patterns = load_notes(input_path)
    solution = plan_fingering(notes, patterns, config)

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        json_path = output_dir / f"{input_path.stem}_fingering.json"
        json_path.write_bytes(solution_to_json_bytes(notes, solution))

    return notes, solution
