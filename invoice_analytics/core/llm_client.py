import logging

import httpx
from openai import OpenAI

from invoice_analytics.core.config import settings

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    pass


class LLMClient:
    def __init__(self):
        self.api_key = settings.LLM_API_KEY
        if not self.api_key:
            raise LLMNotConfiguredError("LLM_API_KEY environment variable not set")

        self.client = OpenAI(
            base_url=settings.LLM_BASE_URL,
            api_key=self.api_key,
            http_client=httpx.Client(timeout=settings.API_TIMEOUT_SECONDS),
        )
        self.model = settings.LLM_MODEL

    def generate(self, prompt: str, system_message: str = "You are a helpful assistant.", temperature: float = 0.1) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
        )
        content = response.choices[0].message.content or ""
        logger.debug(f"LLM returned {len(content)} characters")
        return content
