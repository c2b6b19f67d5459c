import logging
from typing import Optional

import openai

from jira_assistant.config import Settings
from jira_assistant.errors import LLMError

logger = logging.getLogger(__name__)


class LLMClient:
    """Single-turn chat completion: one user prompt in, stripped text out."""

    def __init__(self, settings: Settings, client: Optional[openai.AsyncOpenAI] = None):
        self.model = settings.openai_model
        self._api_key = settings.openai_api_key
        self._client = client

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise LLMError("OPENAI_API_KEY not set; the assistant needs it to understand requests.")
            self._client = openai.AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def complete(self, prompt: str, max_tokens: int = 300, temperature: float = 0.1) -> str:
        client = self._get_client()
        try:
            resp = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI error for model %s: %s", self.model, e)
            raise LLMError(f"OpenAI call failed: {e}") from e

        if not resp.choices or resp.choices[0].message.content is None:
            raise LLMError("OpenAI returned an empty completion")
        return resp.choices[0].message.content.strip()
