"""Layout module for NoteCanvas."""

from .engine import LayoutEngine, coerce_strategy, find_overlaps
from .selector import select_strategy, select_strategy_for_units, metadata_for_unit, is_task_heavy

__all__ = [
    "LayoutEngine",
    "coerce_strategy",
    "find_overlaps",
    "select_strategy",
    "select_strategy_for_units",
    "metadata_for_unit",
    "is_task_heavy",
]
