"""Markdown import: turns .md documents into content units with layout metadata."""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..layout.selector import is_task_heavy
from ..models.content import ContentUnit, TaskItem
from ..models.layout import SourceMetadata

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Imported Note"
IMPORTED_TASK_CATEGORY = "Imported"
SECTION_TASK_CATEGORY = "Section"

_TITLE_HEADING = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
_FIRST_LINE = re.compile(r"^(.+)$", re.MULTILINE)
_HEADING = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
_TASK = re.compile(r"- \[([ xX])\] (.+)$", re.MULTILINE)

CATEGORY_KEYWORDS: Sequence[Tuple[str, Sequence[str]]] = (
    ("Project Management", ("project", "milestone", "deadline", "team", "schedule", "plan")),
    ("Technical", ("code", "algorithm", "function", "api", "database", "server", "client", "programming")),
    ("Meeting", ("meeting", "discussion", "agenda", "attendees", "minutes", "call")),
    ("Research", ("research", "analysis", "study", "findings", "data", "review")),
    ("Personal", ("personal", "home", "family", "shopping", "appointment", "reminder")),
)
TITLE_WEIGHT = 3
MIN_CATEGORY_MATCHES = 2

# Section notes are only split out of complex documents
SECTION_SPLIT_COMPLEXITY = 5
SECTION_MAX_LEVEL = 2
SECTION_MIN_CHARS = 100


@dataclass
class MarkdownSection:
    heading: str
    content: str
    level: int


@dataclass
class MarkdownTask:
    text: str
    checked: bool


@dataclass
class ParsedMarkdown:
    title: str
    sections: List[MarkdownSection] = field(default_factory=list)
    tasks: List[MarkdownTask] = field(default_factory=list)


@dataclass
class ImportedSource:
    """One markdown document ready for layout."""
    name: str
    unit: ContentUnit
    metadata: SourceMetadata


def parse_tasks(content: str) -> List[MarkdownTask]:
    return [
        MarkdownTask(text=match.group(2).strip(), checked=match.group(1).lower() == "x")
        for match in _TASK.finditer(content)
    ]


def parse_markdown(content: str) -> ParsedMarkdown:
    """Extract title, heading sections and checkbox tasks."""
    title_match = _TITLE_HEADING.search(content) or _FIRST_LINE.search(content)
    title = title_match.group(1).strip() if title_match else DEFAULT_TITLE

    sections: List[MarkdownSection] = []
    headings = list(_HEADING.finditer(content))
    for i, match in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(content)
        sections.append(MarkdownSection(
            heading=match.group(2).strip(),
            content=content[match.end():end].strip(),
            level=len(match.group(1)),
        ))

    if not sections and content.strip():
        sections.append(MarkdownSection(heading=title, content=content.strip(), level=1))

    return ParsedMarkdown(title=title or DEFAULT_TITLE, sections=sections, tasks=parse_tasks(content))


def detect_category(content: str, title: str) -> Optional[str]:
    """Keyword-count category detection; title matches weigh triple."""
    best_category, best_count = None, 0
    for category, keywords in CATEGORY_KEYWORDS:
        pattern = re.compile(rf"\b({'|'.join(keywords)})\b", re.IGNORECASE)
        count = len(pattern.findall(content)) + len(pattern.findall(title)) * TITLE_WEIGHT
        if count > best_count:
            best_category, best_count = category, count
    return best_category if best_count > MIN_CATEGORY_MATCHES else None


def calculate_complexity(sections: Sequence[MarkdownSection], tasks: Sequence[MarkdownTask]) -> int:
    """Complexity score from 1 to 10 based on structure and length."""
    section_depth = min(3, max((s.level for s in sections), default=0))
    section_count = min(10, len(sections))
    task_count = min(20, len(tasks))
    content_length = min(10, sum(len(s.content) for s in sections) / 1000)

    score = (section_depth * 1 + section_count * 0.5 + task_count * 0.3 + content_length * 0.2) / 2
    return min(10, max(1, math.floor(score + 0.5)))


class MarkdownImporter:
    """Builds ImportedSource records from markdown text or files."""

    def from_text(self, content: str, name: str = "document.md") -> ImportedSource:
        parsed = parse_markdown(content)
        primary_category = detect_category(content, parsed.title)
        complexity = calculate_complexity(parsed.sections, parsed.tasks)

        unit = ContentUnit(
            title=parsed.title,
            category=primary_category,
            task_items=[
                TaskItem(text=t.text, done=t.checked, category=primary_category or IMPORTED_TASK_CATEGORY)
                for t in parsed.tasks
            ],
        )

        if len(parsed.sections) > 1 and complexity > SECTION_SPLIT_COMPLEXITY:
            for section in parsed.sections:
                if section.level > SECTION_MAX_LEVEL or len(section.content) <= SECTION_MIN_CHARS:
                    continue
                unit.children.append(ContentUnit(
                    title=section.heading,
                    task_items=[
                        TaskItem(text=t.text, done=t.checked, category=SECTION_TASK_CATEGORY)
                        for t in parse_tasks(section.content)
                    ],
                ))

        metadata = SourceMetadata(
            primary_category=primary_category,
            is_task_heavy=is_task_heavy(len(parsed.tasks), len(parsed.sections)),
            complexity=complexity,
        )
        logger.debug(
            f"Parsed {name}: {len(parsed.sections)} sections, {len(parsed.tasks)} tasks, "
            f"category={primary_category}, complexity={complexity}"
        )
        return ImportedSource(name=name, unit=unit, metadata=metadata)

    def load_file(self, path: str) -> ImportedSource:
        """Read and parse a markdown file.

        Raises:
            OSError: If the file cannot be read
        """
        file_path = Path(path)
        content = file_path.read_text(encoding="utf-8")
        return self.from_text(content, name=file_path.name)
