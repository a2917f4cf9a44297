"""Synthetic signup data generation."""

import json
from typing import Sequence

from pydantic import ValidationError

from signup_agent.core.errors import CollaboratorError, DataSynthesisError
from signup_agent.core.models import USER_FORM_DATA_ADAPTER, UserFormData
from signup_agent.llm.client import LLMClient, parse_json_payload
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

SYNTHESIZE_DATA_PROMPT = """Generate realistic user data for a signup form based on the provided fields. Return a JSON object where each key corresponds to a field name and the value is appropriate for that field type. Ensure passwords match if a confirmPassword field is present. Use common formats for fields like email, phone, etc. Every value must be a string.

Fields: {fields}

Example output for fields ["firstName", "email", "password", "confirmPassword"]:
{{
  "firstName": "Alice",
  "email": "alice.johnson45@gmail.com",
  "password": "Str0ngPass321",
  "confirmPassword": "Str0ngPass321"
}}

For fields like phone, address, or username, generate appropriate values (e.g., phone: "123-456-7890", address: "123 Main St, City, Country", username: "alice_johnson").
"""


class DataSynthesizer:
    """Produces plausible values for the fields a form plan needs."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client
        self.logger = logger.bind(component="data_synthesizer")

    async def synthesize(self, fields: Sequence[str]) -> UserFormData:
        """
        Generate one value per field name.

        Raises:
            DataSynthesisError: If the request fails or the reply is not an
                object of string values
        """
        if not fields:
            self.logger.info("No fields to synthesize")
            return {}

        prompt = SYNTHESIZE_DATA_PROMPT.format(fields=json.dumps(list(fields), indent=2))

        try:
            reply = await self.llm_client.complete(prompt)
            payload = parse_json_payload(reply)
        except CollaboratorError as e:
            raise DataSynthesisError(str(e), response_preview=e.response_preview) from e

        if not isinstance(payload, dict):
            raise DataSynthesisError(
                f"Expected a JSON object of field values, got {type(payload).__name__}",
                response_preview=reply[:200]
            )

        try:
            data = USER_FORM_DATA_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise DataSynthesisError(
                f"User data failed validation: {e.error_count()} error(s)",
                response_preview=reply[:200]
            ) from e

        missing = [field for field in fields if field not in data]
        if missing:
            self.logger.warning("Synthesized data is missing fields", missing=missing)

        self.logger.info("User data synthesized", fields=sorted(data))
        return data
