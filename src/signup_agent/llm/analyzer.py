"""Signup form analysis from a screenshot and extracted selectors."""

import json
from typing import List, Sequence

from pydantic import ValidationError

from signup_agent.core.errors import CollaboratorError, FormAnalysisError
from signup_agent.core.models import ACTION_PLAN_ADAPTER, Action, ElementDescriptor
from signup_agent.llm.client import LLMClient, parse_json_payload
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

ANALYZE_FORM_PROMPT = """You are an AI browser agent tasked with filling a signup form on any website. Analyze the provided screenshot and selectors to identify form fields and map them to appropriate field names.

Available selectors:
{selectors}

Task:
- Identify form fields (e.g., firstName, lastName, email, password, confirmPassword, phone, address, username, etc.) based on attributes like id, name, placeholder, or type.
- Map each field to a CSS selector and a field name (e.g., "email" for an email input).
- For inputs you can't confidently map, use the name or id as the field name.
- Output field names only, never example values.
- After filling all fields, click the submit/signup/register button.
- Output a JSON array of steps.

Allowed actions:
- {{ "type": "fill_form", "selector": "<css>", "field": "<field_name>" }}
- {{ "type": "click", "selector": "<css>" }}

Example output:
[
    {{ "type": "fill_form", "selector": "#firstName", "field": "firstName" }},
    {{ "type": "fill_form", "selector": "#email", "field": "email" }},
    {{ "type": "click", "selector": "button[type='submit']" }}
]
"""


class FormAnalyzer:
    """Asks the model which fields to fill and what to click."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client
        self.logger = logger.bind(component="form_analyzer")

    def build_prompt(self, elements: Sequence[ElementDescriptor]) -> str:
        selectors = json.dumps(
            [element.model_dump(exclude_none=True) for element in elements],
            indent=2
        )
        return ANALYZE_FORM_PROMPT.format(selectors=selectors)

    async def analyze(self, screenshot: bytes, elements: Sequence[ElementDescriptor]) -> List[Action]:
        """
        Plan the fill and click actions for the form on screen.

        Args:
            screenshot: PNG bytes of the page
            elements: Descriptors extracted from the same page

        Returns:
            Ordered list of validated actions

        Raises:
            FormAnalysisError: If the request fails or the reply is not a valid plan
        """
        prompt = self.build_prompt(elements)

        try:
            reply = await self.llm_client.complete(prompt, image=screenshot)
            payload = parse_json_payload(reply)
        except CollaboratorError as e:
            raise FormAnalysisError(str(e), response_preview=e.response_preview) from e

        if not isinstance(payload, list):
            raise FormAnalysisError(
                f"Expected a JSON array of actions, got {type(payload).__name__}",
                response_preview=reply[:200]
            )

        try:
            actions = ACTION_PLAN_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise FormAnalysisError(
                f"Action plan failed validation: {e.error_count()} error(s)",
                response_preview=reply[:200]
            ) from e

        self.logger.info(
            "Form analysis completed",
            actions=len(actions),
            elements=len(elements)
        )
        return actions
