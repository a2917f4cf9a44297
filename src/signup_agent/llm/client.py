"""Thin async client for the generative model behind an OpenAI-compatible API."""

import base64
import json
import re
from typing import Any, Optional

from signup_agent.config import Settings, settings as default_settings
from signup_agent.core.errors import CollaboratorError, MissingCredentialError
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove markdown code fences around a model reply."""
    return _FENCE_PATTERN.sub("", text or "").strip()


def parse_json_payload(text: str) -> Any:
    """
    Parse a model reply as JSON after stripping code fences.

    Raises:
        CollaboratorError: If the reply is empty or not valid JSON
    """
    cleaned = strip_code_fence(text)
    if not cleaned:
        raise CollaboratorError("Model returned an empty response")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise CollaboratorError(
            f"Model response is not valid JSON: {e}",
            response_preview=cleaned[:200]
        ) from e


class LLMClient:
    """
    Sends prompts, optionally with a screenshot, to the configured model.

    The underlying ``AsyncOpenAI`` client is injected or built once from
    settings; nothing here is process-global.
    """

    def __init__(self, openai_client=None, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.model = self.settings.llm_model
        self.logger = logger.bind(component="llm_client", model=self.model)
        self.openai_client = openai_client or self._create_openai_client()

    def _create_openai_client(self):
        if not self.settings.gemini_api_key:
            raise MissingCredentialError("GEMINI_API_KEY")

        from openai import AsyncOpenAI
        return AsyncOpenAI(
            api_key=self.settings.gemini_api_key,
            base_url=self.settings.llm_base_url,
        )

    async def complete(self, prompt: str, image: Optional[bytes] = None) -> str:
        """
        Request a completion for ``prompt``.

        Args:
            prompt: Instruction text
            image: Optional PNG bytes inlined as base64

        Returns:
            The stripped reply text

        Raises:
            CollaboratorError: If the request fails or the reply is empty
        """
        content: Any = prompt
        if image is not None:
            image_b64 = base64.b64encode(image).decode("utf-8")
            content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/png;base64,{image_b64}"}
                },
            ]

        self.logger.debug(
            "Requesting completion",
            prompt_length=len(prompt),
            image_size=len(image) if image is not None else 0
        )

        try:
            response = await self.openai_client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": content}],
                max_tokens=self.settings.llm_max_tokens,
                temperature=self.settings.llm_temperature,
            )
        except Exception as e:
            self.logger.error("Model request failed", error=str(e), error_type=type(e).__name__)
            raise CollaboratorError(f"Model request failed: {e}") from e

        if not response.choices:
            raise CollaboratorError("Model returned no choices")

        reply = (response.choices[0].message.content or "").strip()
        self.logger.debug("Completion received", reply_length=len(reply))
        return reply

    async def close(self) -> None:
        """Release the HTTP connections held by the underlying client."""
        await self.openai_client.close()
