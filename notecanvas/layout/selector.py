"""Content heuristics for choosing a layout strategy."""

import logging
from typing import List, Sequence

from ..models.content import ContentUnit
from ..models.layout import LayoutStrategy, SourceMetadata

logger = logging.getLogger(__name__)

PROJECT_MANAGEMENT = "project management"
TASK_HEAVY_THRESHOLD = 5
CLUSTER_UNIT_THRESHOLD = 10


def is_task_heavy(task_count: int, section_count: int) -> bool:
    return task_count > TASK_HEAVY_THRESHOLD or (task_count > 0 and task_count > section_count)


def select_strategy(sources: Sequence[SourceMetadata], total_units: int) -> LayoutStrategy:
    """Pick a layout for a batch of sources.

    workflow when more than a third of sources are project management,
    else hierarchy when more than half are task-heavy, else cluster when
    the batch holds more than 10 units, else grid.

    Args:
        sources: One metadata record per source (file, transcript group)
        total_units: Number of notes to place, children included
    """
    count = len(sources)
    if count == 0:
        return LayoutStrategy.GRID

    project_sources = sum(
        1 for source in sources
        if (source.primary_category or "").strip().lower() == PROJECT_MANAGEMENT
    )
    task_heavy_sources = sum(1 for source in sources if source.is_task_heavy)

    if project_sources > count / 3:
        strategy = LayoutStrategy.WORKFLOW
    elif task_heavy_sources > count / 2:
        strategy = LayoutStrategy.HIERARCHY
    elif total_units > CLUSTER_UNIT_THRESHOLD:
        strategy = LayoutStrategy.CLUSTER
    else:
        strategy = LayoutStrategy.GRID

    logger.info(
        f"Selected {strategy.value} layout: {count} sources, {project_sources} project, "
        f"{task_heavy_sources} task-heavy, {total_units} units"
    )
    return strategy


def metadata_for_unit(unit: ContentUnit) -> SourceMetadata:
    """Metadata for a unit that did not come with its own analysis."""
    return SourceMetadata(
        primary_category=unit.category,
        is_task_heavy=is_task_heavy(len(unit.task_items), len(unit.children)),
    )


def select_strategy_for_units(units: Sequence[ContentUnit]) -> LayoutStrategy:
    sources: List[SourceMetadata] = [metadata_for_unit(unit) for unit in units]
    total_units = sum(1 + len(unit.children) for unit in units)
    return select_strategy(sources, total_units)
