"""LLM-backed categorization of transcripts into task groups."""

import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models.content import CategorizationResult, NoteGroup, TaskItem
from .base import CategorizationPort, CompletionEngine
from .text_cleaning import GROCERY_CATEGORIES, clean_grocery_item_text

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Dictated Note"
FALLBACK_CATEGORY = "general"
FALLBACK_REASONING = "no categorization available"
DEFAULT_GROUP_TITLE = "Tasks"

SYSTEM_PROMPT = """Analyze the user's dictation/notes and extract:
1. Tasks that need to be done, with each task having a "text" property and "done" set to false.
2. Categorize each task into logical groups by their purpose, project, or context.
3. Suggest how many separate notes these tasks should be split into.

SPECIAL HANDLING FOR RECIPES:
- If the content appears to be a recipe, create a dedicated "recipe" note group.
- Treat each ingredient as a separate task with category "ingredient".
- Treat each preparation/cooking step as a separate task with category "recipe_step".

SPECIAL HANDLING FOR GROCERY LISTS:
- If the content appears to be grocery or shopping items, create a single "grocery" or "shopping" note group.
- Label each item as category "grocery_item" or "shopping_item".
- Do not create multiple grocery or shopping lists unless the user mentions different stores or trips.

If tasks belong to different contexts (work, home, shopping, fitness, recipe...), split them into separate note groups even if each group only has a few tasks.

Return strict JSON with:
- "tasks": array of task objects with "text", "done" and "category"
- "noteGroups": array of groups, each with "title", "category" and "taskIndices" (indices into "tasks")
- "reasoning": brief explanation of why the tasks were split this way"""


class _RawTask(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None
    done: bool = False
    category: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: Optional[str]) -> str:
        return (value or "").strip()


class _RawNoteGroup(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[str] = None
    category: Optional[str] = None
    task_indices: List[Any] = Field(default_factory=list, alias="taskIndices")


class _RawCategorization(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tasks: List[_RawTask] = Field(default_factory=list)
    note_groups: Optional[List[_RawNoteGroup]] = Field(default=None, alias="noteGroups")
    suggestions: Optional[List[_RawNoteGroup]] = None
    reasoning: str = ""


def fallback_result(text: str) -> CategorizationResult:
    """Single note covering the whole text with no tasks."""
    return CategorizationResult(
        task_items=[],
        note_groups=[NoteGroup(
            title=FALLBACK_TITLE,
            category=FALLBACK_CATEGORY,
            task_indices=[],
            body_text=text,
        )],
        reasoning=FALLBACK_REASONING,
        is_fallback=True,
    )


def valid_task_indices(indices: List[Any], task_count: int) -> List[int]:
    """Keep in-range integer indices, preserving order."""
    return [
        index for index in indices
        if isinstance(index, int) and not isinstance(index, bool) and 0 <= index < task_count
    ]


class CategorizationClient(CategorizationPort):
    """Categorizes transcripts with one completion call and never raises on failure."""

    def __init__(
        self,
        engine: CompletionEngine,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        include_key_terms: bool = True,
    ):
        """Initialize categorization client.

        Args:
            engine: Transport implementing the CompletionEngine protocol
            temperature: Sampling temperature for categorization
            max_tokens: Response size cap
            include_key_terms: Whether key terms are appended to the prompt
        """
        self.engine = engine
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.include_key_terms = include_key_terms

        logger.info("CategorizationClient initialized")

    async def categorize(self, text: str, key_terms: List[str]) -> CategorizationResult:
        if not text or not text.strip():
            logger.warning("Empty text passed to categorize; returning fallback")
            return fallback_result(text or "")

        prompt = self._build_prompt(text, key_terms)
        try:
            response_text = await self.engine.send_prompt(
                prompt,
                system_prompt=SYSTEM_PROMPT,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                json_mode=True,
            )
            result = self._parse_response(response_text)
        except Exception as e:
            logger.warning(f"Categorization failed, using single-note fallback: {e}")
            return fallback_result(text)

        logger.info(
            f"Categorized transcript into {len(result.note_groups)} groups, "
            f"{len(result.task_items)} tasks"
        )
        return result

    def _build_prompt(self, text: str, key_terms: List[str]) -> str:
        if not (self.include_key_terms and key_terms):
            return text
        return f"{text}\n\nKey terms used in my existing notes: {', '.join(key_terms)}"

    def _parse_response(self, response_text: str) -> CategorizationResult:
        """Parse and validate the model's JSON.

        Blank tasks are dropped individually and group indices are remapped
        onto the tasks that remain.

        Raises:
            ValueError: On unparsable JSON, a payload of the wrong shape, or
                        one with neither tasks nor note groups
        """
        payload = json.loads(response_text)
        if not isinstance(payload, dict):
            raise ValueError("categorization response is not a JSON object")
        try:
            raw = _RawCategorization.model_validate(payload)
        except ValidationError as e:
            raise ValueError(f"categorization response failed validation: {e}")

        task_items = []
        # raw task index -> index into task_items
        kept_indices = {}
        for raw_index, raw_task in enumerate(raw.tasks):
            if not raw_task.text:
                logger.debug(f"Dropped blank task at index {raw_index}")
                continue
            category = raw_task.category or FALLBACK_CATEGORY
            task_text = raw_task.text
            if category in GROCERY_CATEGORIES:
                task_text = clean_grocery_item_text(task_text)
            kept_indices[raw_index] = len(task_items)
            task_items.append(TaskItem(text=task_text, done=False, category=category))

        raw_groups = raw.note_groups if raw.note_groups else (raw.suggestions or [])
        if not task_items and not raw_groups:
            raise ValueError("categorization response has no tasks or note groups")

        note_groups = []
        for raw_group in raw_groups:
            indices = [
                kept_indices[index]
                for index in valid_task_indices(raw_group.task_indices, len(raw.tasks))
                if index in kept_indices
            ]
            dropped = len(raw_group.task_indices) - len(indices)
            if dropped:
                logger.debug(f"Dropped {dropped} invalid task indices from group '{raw_group.title}'")
            category = raw_group.category or FALLBACK_CATEGORY
            note_groups.append(NoteGroup(
                title=(raw_group.title or "").strip() or f"{category} Tasks",
                category=category,
                task_indices=indices,
            ))

        # Make sure tasks always land in at least one group
        if not note_groups and task_items:
            note_groups = [NoteGroup(
                title=DEFAULT_GROUP_TITLE,
                category=FALLBACK_CATEGORY,
                task_indices=list(range(len(task_items))),
            )]

        return CategorizationResult(
            task_items=task_items,
            note_groups=note_groups,
            reasoning=raw.reasoning.strip(),
        )
