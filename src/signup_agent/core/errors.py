"""Exception hierarchy for the signup form agent."""

from typing import Optional


class SignupAgentError(Exception):
    """Base class for all agent errors."""


class InvalidUrlError(SignupAgentError):
    """The user supplied a URL the agent cannot navigate to."""

    def __init__(self, url: str, reason: str = "URL must start with http:// or https://"):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class MissingCredentialError(SignupAgentError):
    """A required credential is not configured."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"{variable} is not set; add it to the environment or .env file")


class CollaboratorError(SignupAgentError):
    """The generative model failed or returned an unusable payload."""

    def __init__(self, message: str, response_preview: Optional[str] = None):
        self.response_preview = response_preview
        super().__init__(message)


class FormAnalysisError(CollaboratorError):
    """Form analysis did not produce a valid action plan."""


class DataSynthesisError(CollaboratorError):
    """Synthetic user data could not be produced."""


class ActionExecutionError(SignupAgentError):
    """A single fill or click action could not be carried out."""

    def __init__(self, action_type: str, selector: Optional[str], cause: Exception):
        self.action_type = action_type
        self.selector = selector
        self.cause = cause
        super().__init__(f"{action_type} on {selector!r} failed: {cause}")
