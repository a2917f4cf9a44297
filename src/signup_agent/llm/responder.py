"""Conversational replies for free text that is not a URL."""

from signup_agent.llm.client import LLMClient
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

GENERAL_RESPONSE_PROMPT = """You are a friendly and helpful AI assistant. The user has provided the following input: "{user_input}".
Respond in a conversational, natural tone. If the input is a greeting like "Hi" or "Hello", reply warmly and encourage further interaction (e.g., asking if they want to provide a URL to fill a form). For other inputs, provide a relevant and engaging response. Keep the response concise, under 100 words, and avoid generating JSON or code unless explicitly requested.

Example:
User: "Hi"
Response: "Hey there! Nice to hear from you! Want to give me a URL to fill a form, or just chat?"
"""


class ConversationalResponder:
    """Answers small talk and nudges the user towards a URL."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client
        self.logger = logger.bind(component="responder")

    async def reply(self, user_input: str) -> str:
        prompt = GENERAL_RESPONSE_PROMPT.format(user_input=user_input.replace('"', "'"))
        reply = await self.llm_client.complete(prompt)
        self.logger.debug("Conversational reply generated", reply_length=len(reply))
        return reply
