"""Deterministic canvas placement of content units.

Every strategy positions the top-left corner of fixed-size note boxes
(``LayoutSettings.note_width`` x ``note_height``). Children of a unit
(section notes) are placed relative to their parent. Boxes produced in one
call never overlap; ``find_overlaps`` is the check used to verify that.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import LayoutError
from ..models.content import ContentUnit, PlacedUnit
from ..models.layout import LayoutSettings, LayoutStrategy
from ..models.notes import Position

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

HIERARCHY_CHILD_COLUMNS = 3
WORKFLOW_CHILD_COLUMNS = 2
CLUSTER_COLUMNS = 2
CHILD_START_ANGLE = math.pi / 4  # First child sits below and to the right of its parent

_EPSILON = 1e-6


@dataclass
class _Block:
    """A unit plus its children, positioned relative to the parent's corner."""
    unit: ContentUnit
    child_offsets: List[Tuple[float, float]]
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def coerce_strategy(strategy: Union[str, LayoutStrategy]) -> LayoutStrategy:
    """Accept a LayoutStrategy or its string value."""
    if isinstance(strategy, LayoutStrategy):
        return strategy
    try:
        return LayoutStrategy(str(strategy).lower())
    except ValueError:
        raise LayoutError(f"Unknown layout strategy: {strategy!r}")


def find_overlaps(placed: Sequence[PlacedUnit], width: float, height: float) -> List[Tuple[int, int]]:
    """Index pairs of overlapping boxes.

    Boxes are enumerated main unit first, then its children, in input order.
    Boxes that only touch along an edge do not overlap.
    """
    positions: List[Position] = []
    for item in placed:
        positions.append(item.position)
        positions.extend(item.child_positions)

    overlaps = []
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            dx = abs(positions[i].x - positions[j].x)
            dy = abs(positions[i].y - positions[j].y)
            if dx < width - _EPSILON and dy < height - _EPSILON:
                overlaps.append((i, j))
    return overlaps


class LayoutEngine:
    """Assigns non-overlapping canvas positions to content units."""

    def __init__(self, settings: Optional[LayoutSettings] = None):
        self.settings = settings or LayoutSettings()

    def layout(
        self,
        units: Sequence[ContentUnit],
        strategy: Union[str, LayoutStrategy],
        anchor: Position,
    ) -> List[PlacedUnit]:
        """Place ``units`` around ``anchor`` using ``strategy``.

        The result is in input order and depends only on the inputs.

        Raises:
            LayoutError: For an unknown strategy or a non-finite anchor
        """
        strategy = coerce_strategy(strategy)
        if not units:
            return []
        if not (math.isfinite(anchor.x) and math.isfinite(anchor.y)):
            raise LayoutError(f"Layout anchor must be finite, got ({anchor.x}, {anchor.y})")

        if strategy is LayoutStrategy.GRID:
            placed = self._grid(units, anchor)
        elif strategy is LayoutStrategy.HIERARCHY:
            placed = self._hierarchy(units, anchor)
        elif strategy is LayoutStrategy.WORKFLOW:
            placed = self._workflow(units, anchor)
        else:
            placed = self._cluster(units, anchor)

        overlaps = find_overlaps(placed, self.settings.note_width, self.settings.note_height)
        if overlaps:
            logger.warning(f"{strategy.value} layout produced {len(overlaps)} overlapping boxes")

        logger.debug(f"Placed {len(placed)} units with {strategy.value} layout")
        return placed

    def _grid(self, units: Sequence[ContentUnit], anchor: Position) -> List[PlacedUnit]:
        """Row-major grid of ceil(sqrt(n)) columns; children take the slots after their parent."""
        s = self.settings
        total = sum(1 + len(unit.children) for unit in units)
        cols = math.ceil(math.sqrt(total))
        rows = math.ceil(total / cols)
        pitch_x = s.note_width + s.spacing
        pitch_y = s.note_height + s.spacing

        start_x = anchor.x - (cols * pitch_x - s.spacing) / 2
        start_y = anchor.y - (rows * pitch_y - s.spacing) / 2

        def slot_position(slot: int) -> Position:
            return Position(start_x + (slot % cols) * pitch_x, start_y + (slot // cols) * pitch_y)

        placed = []
        slot = 0
        for unit in units:
            position = slot_position(slot)
            slot += 1
            children = [slot_position(slot + j) for j in range(len(unit.children))]
            slot += len(unit.children)
            placed.append(PlacedUnit(unit=unit, position=position, child_positions=children))
        return placed

    def _hierarchy(self, units: Sequence[ContentUnit], anchor: Position) -> List[PlacedUnit]:
        """One column of parents; each parent's children below it in indented rows of 3."""
        s = self.settings
        row_pitch = s.note_height + s.spacing
        block_heights = [
            s.note_height + math.ceil(len(unit.children) / HIERARCHY_CHILD_COLUMNS) * row_pitch
            for unit in units
        ]
        total_height = sum(block_heights) + s.hierarchy_vertical_spacing * (len(units) - 1)

        x = anchor.x - s.note_width / 2
        y = anchor.y - total_height / 2

        placed = []
        for unit, block_height in zip(units, block_heights):
            children = [
                Position(
                    x + s.hierarchy_indent + (j % HIERARCHY_CHILD_COLUMNS) * (s.note_width + s.spacing),
                    y + s.note_height + s.spacing + (j // HIERARCHY_CHILD_COLUMNS) * row_pitch,
                )
                for j in range(len(unit.children))
            ]
            placed.append(PlacedUnit(unit=unit, position=Position(x, y), child_positions=children))
            y += block_height + s.hierarchy_vertical_spacing
        return placed

    def _workflow(self, units: Sequence[ContentUnit], anchor: Position) -> List[PlacedUnit]:
        """Parents left to right; children in a 2-column grid under each parent."""
        s = self.settings
        column_pitch = max(
            s.note_width + s.workflow_horizontal_spacing,
            WORKFLOW_CHILD_COLUMNS * (s.note_width + s.spacing),
        )
        start_x = anchor.x - ((len(units) - 1) * column_pitch + s.note_width) / 2
        main_y = anchor.y - s.note_height / 2

        placed = []
        for index, unit in enumerate(units):
            main_x = start_x + index * column_pitch
            children = [
                Position(
                    main_x + (j % WORKFLOW_CHILD_COLUMNS) * (s.note_width + s.spacing),
                    main_y + s.note_height + s.workflow_vertical_spacing
                    + (j // WORKFLOW_CHILD_COLUMNS) * (s.note_height + s.spacing),
                )
                for j in range(len(unit.children))
            ]
            placed.append(PlacedUnit(unit=unit, position=Position(main_x, main_y), child_positions=children))
        return placed

    def _cluster(self, units: Sequence[ContentUnit], anchor: Position) -> List[PlacedUnit]:
        """Category buckets on a circle around the anchor, 2-column grid inside each bucket."""
        s = self.settings

        buckets: Dict[str, List[int]] = {}
        for index, unit in enumerate(units):
            buckets.setdefault(unit.category or UNCATEGORIZED, []).append(index)

        # Bucket-local placement: parent corner relative to the bucket's top-left
        local: Dict[int, Tuple[float, float]] = {}
        blocks: Dict[int, _Block] = {}
        extents: List[Tuple[float, float]] = []
        for indices in buckets.values():
            bucket_blocks = [self._child_block(units[i]) for i in indices]
            cell_w = max(block.width for block in bucket_blocks) + s.cluster_spacing
            cell_h = max(block.height for block in bucket_blocks) + s.cluster_spacing
            cols = min(CLUSTER_COLUMNS, len(indices))
            rows = math.ceil(len(indices) / cols)

            for slot, (index, block) in enumerate(zip(indices, bucket_blocks)):
                origin_x = (slot % cols) * cell_w
                origin_y = (slot // cols) * cell_h
                local[index] = (origin_x - block.min_x, origin_y - block.min_y)
                blocks[index] = block
            extents.append((cols * cell_w - s.cluster_spacing, rows * cell_h - s.cluster_spacing))

        # Adjacent buckets on the circle must be at least two bucket radii apart
        count = len(buckets)
        bucket_radius = max(math.hypot(w, h) / 2 for w, h in extents)
        radius = s.cluster_radius
        if count > 1:
            required = (2 * bucket_radius + s.cluster_spacing) / (2 * math.sin(math.pi / count))
            radius = max(radius, required)

        placed: Dict[int, PlacedUnit] = {}
        for bucket_index, (indices, (width, height)) in enumerate(zip(buckets.values(), extents)):
            angle = bucket_index / count * 2 * math.pi
            left = anchor.x + math.cos(angle) * radius - width / 2
            top = anchor.y + math.sin(angle) * radius - height / 2
            for index in indices:
                rel_x, rel_y = local[index]
                parent = Position(left + rel_x, top + rel_y)
                children = [Position(parent.x + dx, parent.y + dy) for dx, dy in blocks[index].child_offsets]
                placed[index] = PlacedUnit(unit=units[index], position=parent, child_positions=children)

        return [placed[i] for i in range(len(units))]

    def _child_block(self, unit: ContentUnit) -> _Block:
        """Children at fixed angular steps around the parent, one ring per full turn.

        The ring distance exceeds the box diagonal, so a child never touches
        its parent; the angular step keeps neighbouring children a diagonal
        apart.
        """
        s = self.settings
        diagonal = math.hypot(s.note_width, s.note_height)
        distance = diagonal + s.spacing
        step = 2 * math.asin(diagonal / (2 * distance))
        per_ring = max(1, int(2 * math.pi / step))

        offsets = []
        for i in range(len(unit.children)):
            ring, position_in_ring = divmod(i, per_ring)
            angle = CHILD_START_ANGLE + position_in_ring * step
            reach = distance * (ring + 1)
            offsets.append((math.cos(angle) * reach, math.sin(angle) * reach))

        xs = [0.0] + [dx for dx, _ in offsets]
        ys = [0.0] + [dy for _, dy in offsets]
        return _Block(
            unit=unit,
            child_offsets=offsets,
            min_x=min(xs),
            min_y=min(ys),
            max_x=max(xs) + s.note_width,
            max_y=max(ys) + s.note_height,
        )
