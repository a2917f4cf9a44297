"""Generative model collaborators."""

from signup_agent.llm.client import LLMClient, parse_json_payload, strip_code_fence
from signup_agent.llm.analyzer import FormAnalyzer
from signup_agent.llm.synthesizer import DataSynthesizer
from signup_agent.llm.responder import ConversationalResponder

__all__ = [
    "LLMClient", "parse_json_payload", "strip_code_fence",
    "FormAnalyzer", "DataSynthesizer", "ConversationalResponder"
]
