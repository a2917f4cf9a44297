"""Core data models for the signup form agent."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class RunState(str, Enum):
    """Stages of a single agent run, entered strictly in order."""
    IDLE = "idle"
    NAVIGATED = "navigated"
    SNAPSHOTTED = "snapshotted"
    ACTIONS_PLANNED = "actions_planned"
    DATA_SYNTHESIZED = "data_synthesized"
    EXECUTING = "executing"
    CLOSED = "closed"


class OutcomeStatus(str, Enum):
    """Result of attempting one planned action."""
    FILLED = "filled"
    CLICKED = "clicked"
    SKIPPED = "skipped"
    FAILED = "failed"


class ElementDescriptor(BaseModel):
    """Interactive element captured from the page with a synthesized selector."""
    model_config = ConfigDict(frozen=True)

    tag: str = Field(..., description="Lower-cased tag name")
    id: Optional[str] = Field(None, description="id attribute")
    name: Optional[str] = Field(None, description="name attribute")
    placeholder: Optional[str] = Field(None, description="placeholder attribute")
    type: Optional[str] = Field(None, description="type attribute")
    text: Optional[str] = Field(None, description="Visible text or value attribute")
    selector: str = Field(..., min_length=1, description="CSS selector resolving the element")


class FillAction(BaseModel):
    """Fill the element at ``selector`` with the value for ``field``."""
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    type: Literal["fill_form"] = "fill_form"
    selector: str = Field(..., min_length=1, description="CSS selector of the input")
    field: str = Field(..., min_length=1, description="Field name the value is looked up by")


class ClickAction(BaseModel):
    """Click the element at ``selector``."""
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    type: Literal["click"] = "click"
    selector: str = Field(..., min_length=1, description="CSS selector of the control")


Action = Annotated[Union[FillAction, ClickAction], Field(discriminator="type")]

UserFormData = Dict[str, str]

ACTION_PLAN_ADAPTER = TypeAdapter(List[Action])
USER_FORM_DATA_ADAPTER = TypeAdapter(Dict[str, str])


def fill_fields(actions: List[Action]) -> List[str]:
    """Field names referenced by fill actions, in plan order without duplicates."""
    fields: List[str] = []
    for action in actions:
        if isinstance(action, FillAction) and action.field not in fields:
            fields.append(action.field)
    return fields


class ActionOutcome(BaseModel):
    """What happened when one action was executed."""
    action: Action = Field(..., description="The planned action")
    status: OutcomeStatus = Field(..., description="Outcome status")
    detail: Optional[str] = Field(None, description="Resolved field, fallback used, or error message")


class RunReport(BaseModel):
    """Summary of a completed agent run."""
    url: str = Field(..., description="Page the form was filled on")
    screenshot_path: Optional[str] = Field(None, description="Screenshot kept for the run")
    elements: List[ElementDescriptor] = Field(default_factory=list, description="Extracted elements")
    actions: List[Action] = Field(default_factory=list, description="Planned actions")
    data: UserFormData = Field(default_factory=dict, description="Synthetic user data")
    outcomes: List[ActionOutcome] = Field(default_factory=list, description="Per-action outcomes")
    state: RunState = Field(RunState.IDLE, description="Last state reached")
    started_at: datetime = Field(default_factory=datetime.now, description="Run start time")
    finished_at: Optional[datetime] = Field(None, description="Run end time")

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == OutcomeStatus.FAILED)
