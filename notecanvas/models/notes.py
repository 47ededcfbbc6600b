"""Canonical note and task records handed to the note collection."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any
from enum import Enum


# Colors understood by the canvas renderer
AVAILABLE_COLORS: List[str] = [
    "blue", "green", "pink", "yellow",
    "purple", "orange", "teal", "red",
    "indigo", "amber", "emerald", "rose",
]

DEFAULT_CATEGORY_COLORS: Dict[str, str] = {
    "work": "blue",
    "personal": "green",
    "shopping": "yellow",
    "health": "pink",
    "finance": "blue",
    "education": "green",
    "travel": "yellow",
    "home": "pink",
    "project": "blue",
    "meeting": "green",
    "deadline": "pink",
    "general": "blue",
}


class NoteType(Enum):
    """Discriminator for the kind of note shown on the canvas."""
    STICKY = "sticky"
    TASK = "task"
    PROJECT = "project"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Position:
    """Top-left corner of a note on the canvas."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Task:
    """A checklist entry inside a note."""
    id: str
    text: str
    done: bool = False
    category: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "text": self.text, "done": self.done}
        if self.category is not None:
            data["category"] = self.category
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        if self.priority is not None:
            data["priority"] = self.priority.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        priority = data.get("priority")
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            done=bool(data.get("done", False)),
            category=data.get("category"),
            due_date=data.get("dueDate"),
            priority=Priority(priority) if priority else None,
        )


@dataclass
class AISuggestions:
    """Categorization context attached to AI-produced notes."""
    reasoning: Optional[str] = None
    category: Optional[str] = None
    task_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reasoning": self.reasoning,
            "category": self.category,
            "taskCount": self.task_count,
        }


@dataclass
class Note:
    """Canonical note record.

    The fields up to ``updated_at`` are required for every note type; the
    remaining fields are optional extensions. ``type`` is the discriminator
    the renderer switches on.
    """
    id: str
    type: NoteType
    content: str
    position: Position
    color: str
    created_at: datetime
    updated_at: datetime
    tasks: List[Task] = field(default_factory=list)

    # Optional extensions
    category: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None
    is_voice_note: bool = False
    expanded: bool = True
    ai_suggestions: Optional[AISuggestions] = None

    @property
    def title(self) -> str:
        """First line of the content."""
        return self.content.split("\n", 1)[0].strip()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into the camelCase shape stored by the note collection."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "position": self.position.to_dict(),
            "color": self.color,
            "tasks": [task.to_dict() for task in self.tasks],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "expanded": self.expanded,
        }
        if self.category is not None:
            data["category"] = self.category
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        if self.priority is not None:
            data["priority"] = self.priority.value
        if self.is_voice_note:
            data["isVoiceNote"] = True
        if self.ai_suggestions is not None:
            data["aiSuggestions"] = self.ai_suggestions.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        position = data.get("position") or {}
        priority = data.get("priority")
        suggestions = data.get("aiSuggestions")
        now = datetime.now()
        return cls(
            id=data["id"],
            type=NoteType(data.get("type", NoteType.STICKY.value)),
            content=data.get("content", ""),
            position=Position(float(position.get("x", 0.0)), float(position.get("y", 0.0))),
            color=data.get("color", "blue"),
            created_at=datetime.fromisoformat(data["createdAt"]) if data.get("createdAt") else now,
            updated_at=datetime.fromisoformat(data["updatedAt"]) if data.get("updatedAt") else now,
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            category=data.get("category"),
            due_date=data.get("dueDate"),
            priority=Priority(priority) if priority else None,
            is_voice_note=bool(data.get("isVoiceNote", False)),
            expanded=bool(data.get("expanded", True)),
            ai_suggestions=AISuggestions(
                reasoning=suggestions.get("reasoning"),
                category=suggestions.get("category"),
                task_count=suggestions.get("taskCount", 0),
            ) if suggestions else None,
        )
