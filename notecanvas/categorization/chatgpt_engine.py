"""ChatGPT engine for sending prompts and getting responses."""

import logging
import aiohttp
from typing import Optional

from ..errors import CategorizationError

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class ChatGPTEngine:
    """Simple engine for sending prompts to ChatGPT and getting responses."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o",
        base_url: str = OPENAI_CHAT_URL,
        timeout_seconds: float = 30.0,
    ):
        """Initialize ChatGPT engine.

        Args:
            api_key: OpenAI API key; without one every request fails
            model: ChatGPT model to use
            base_url: Chat completions endpoint
            timeout_seconds: Total timeout for one request
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

        logger.info(f"ChatGPTEngine initialized with model: {model}")

    async def send_prompt(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        json_mode: bool = False,
    ) -> str:
        """Send a prompt to ChatGPT and get the response.

        Args:
            prompt: User message
            system_prompt: Optional system instruction
            temperature: Temperature for response generation (0.0 to 1.0)
            max_tokens: Maximum tokens in response
            json_mode: Request a JSON object response

        Returns:
            Response text from ChatGPT

        Raises:
            CategorizationError: If no API key is configured, or the API
                                 returns a non-200 status or an unexpected
                                 payload
            aiohttp.ClientError: On transport failures
            asyncio.TimeoutError: When the request exceeds the timeout
        """
        if not self.api_key:
            raise CategorizationError("OpenAI API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        data = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens
        }
        if json_mode:
            data["response_format"] = {"type": "json_object"}

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.base_url, headers=headers, json=data) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise CategorizationError(
                        f"ChatGPT API error: {response.status} - {error_text}",
                        status=response.status,
                    )

                result = await response.json(content_type=None)
                try:
                    content = result["choices"][0]["message"]["content"]
                except (KeyError, IndexError, TypeError):
                    raise CategorizationError("ChatGPT API returned an unexpected payload")
                if not isinstance(content, str):
                    raise CategorizationError("ChatGPT API returned no message content")
                return content.strip()
