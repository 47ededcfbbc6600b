"""Layout-related data models."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import LayoutError


class LayoutStrategy(Enum):
    GRID = "grid"
    HIERARCHY = "hierarchy"
    WORKFLOW = "workflow"
    CLUSTER = "cluster"


@dataclass(frozen=True)
class LayoutSettings:
    """Nominal note box and spacing constants."""
    note_width: float = 280.0
    note_height: float = 220.0
    spacing: float = 30.0
    hierarchy_vertical_spacing: float = 150.0
    hierarchy_indent: float = 80.0
    workflow_horizontal_spacing: float = 350.0
    workflow_vertical_spacing: float = 50.0
    cluster_spacing: float = 40.0
    cluster_radius: float = 300.0

    def __post_init__(self):
        for name, value in self.__dict__.items():
            if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
                raise LayoutError(f"Layout setting {name} must be a finite number, got {value!r}")
        if self.note_width <= 0 or self.note_height <= 0:
            raise LayoutError(
                f"Note dimensions must be positive, got {self.note_width}x{self.note_height}"
            )
        if min(self.spacing, self.hierarchy_vertical_spacing, self.workflow_horizontal_spacing,
               self.workflow_vertical_spacing, self.cluster_spacing) <= 0:
            raise LayoutError("Layout spacing values must be positive")
        if self.hierarchy_indent < 0 or self.cluster_radius < 0:
            raise LayoutError("Layout indent and cluster radius cannot be negative")

    @classmethod
    def from_config(cls, config) -> "LayoutSettings":
        """Build settings from the ``layout`` section of a NoteCanvasConfig."""
        return cls(
            note_width=float(config.get("layout.note_width", 280)),
            note_height=float(config.get("layout.note_height", 220)),
            spacing=float(config.get("layout.spacing", 30)),
            cluster_radius=float(config.get("layout.cluster_radius", 300)),
        )


@dataclass
class SourceMetadata:
    """Per-source content analysis used to pick a layout strategy."""
    primary_category: Optional[str] = None
    is_task_heavy: bool = False
    complexity: int = 1  # 1-10
