"""Fingering Planner — rule-based dynamic-programming piano fingering.

Package contents:
    models         – notes, pattern segments and solution records
    config         – difficulty profile and optimizer limits
    hand_position  – scale / five-finger-position analysis
    cost_model     – initial and transition cost functions
    solver         – per-hand DP optimizer and windowed optimizer
    planner        – splits hands, plans each, merges the results
    annotate       – JSON input/output and tabular export
    evaluator      – agreement with reference fingerings
"""

from .config import Difficulty, PlannerConfig, load_config
from .models import (
    FingeringSolution,
    FingeringState,
    Hand,
    HandPosition,
    Note,
    PatternSegment,
    PatternType,
)
from .planner import FingeringPlanner, plan_fingering
from .solver import plan_hand_fingering

__all__ = [
    "Difficulty",
    "FingeringPlanner",
    "FingeringSolution",
    "FingeringState",
    "Hand",
    "HandPosition",
    "Note",
    "PatternSegment",
    "PatternType",
    "PlannerConfig",
    "load_config",
    "plan_fingering",
    "plan_hand_fingering",
]
