"""Interfaces for the categorization boundary."""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol

from ..models.content import CategorizationResult


class CompletionEngine(Protocol):
    """Protocol for LLM transports that turn a prompt into response text."""

    async def send_prompt(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        json_mode: bool = False,
    ) -> str:
        """Send a prompt and return the raw response text."""
        ...


class CategorizationPort(ABC):
    """Text in, structured categorization out.

    Implementations must not raise on backend failures; they return a
    fallback result instead. Injected into services so tests and
    deployments can swap the backend.
    """

    @abstractmethod
    async def categorize(self, text: str, key_terms: List[str]) -> CategorizationResult:
        """Categorize ``text`` into tasks and note groups.

        Args:
            text: Transcript or note text
            key_terms: Vocabulary from existing notes to bias the model

        Returns:
            CategorizationResult, possibly the fallback result
        """
        pass
