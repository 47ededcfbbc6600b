"""Unit tests for layout strategy selection."""

import pytest

from notecanvas.layout.selector import (
    is_task_heavy,
    metadata_for_unit,
    select_strategy,
    select_strategy_for_units,
)
from notecanvas.models import ContentUnit, LayoutStrategy, SourceMetadata, TaskItem


@pytest.mark.unit
class TestSelectStrategy:
    """Test cases for the content heuristic."""

    def test_thirteen_distinct_categories_pick_cluster(self, make_units):
        assert select_strategy_for_units(make_units(13)) is LayoutStrategy.CLUSTER

    def test_small_batch_picks_grid(self, make_units):
        assert select_strategy_for_units(make_units(4)) is LayoutStrategy.GRID

    def test_children_count_towards_cluster_threshold(self, make_units):
        assert select_strategy_for_units(make_units(3, children=3)) is LayoutStrategy.CLUSTER

    def test_empty_picks_grid(self):
        assert select_strategy([], 0) is LayoutStrategy.GRID

    def test_project_management_majority_picks_workflow(self):
        sources = [
            SourceMetadata(primary_category="Project Management"),
            SourceMetadata(primary_category="project management"),
            SourceMetadata(primary_category="Technical", is_task_heavy=True),
            SourceMetadata(primary_category=None, is_task_heavy=True),
        ]

        assert select_strategy(sources, 30) is LayoutStrategy.WORKFLOW

    def test_exactly_one_third_projects_is_not_enough(self):
        sources = [
            SourceMetadata(primary_category="Project Management"),
            SourceMetadata(),
            SourceMetadata(),
        ]

        assert select_strategy(sources, 3) is LayoutStrategy.GRID

    def test_task_heavy_majority_picks_hierarchy(self):
        sources = [SourceMetadata(is_task_heavy=True)] * 3 + [SourceMetadata()] * 2

        assert select_strategy(sources, 20) is LayoutStrategy.HIERARCHY

    def test_half_task_heavy_falls_through(self):
        sources = [SourceMetadata(is_task_heavy=True), SourceMetadata()]

        assert select_strategy(sources, 11) is LayoutStrategy.CLUSTER


@pytest.mark.unit
class TestTaskHeavy:

    @pytest.mark.parametrize("tasks,sections,expected", [
        (6, 10, True),
        (5, 10, False),
        (3, 2, True),
        (2, 2, False),
        (0, 0, False),
    ])
    def test_is_task_heavy(self, tasks, sections, expected):
        assert is_task_heavy(tasks, sections) is expected

    def test_metadata_for_unit(self):
        unit = ContentUnit(title="x", category="work", task_items=[TaskItem(text="a")])

        metadata = metadata_for_unit(unit)

        assert metadata.primary_category == "work"
        assert metadata.is_task_heavy is True
