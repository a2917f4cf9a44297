"""Execution of planned fill and click actions against a live page."""

import re
from typing import List, Mapping, Pattern, Sequence

from signup_agent.core.errors import ActionExecutionError
from signup_agent.core.models import Action, ActionOutcome, ClickAction, FillAction, OutcomeStatus
from signup_agent.forms.normalizer import resolve_field_value
from signup_agent.utils.logging import get_logger, log_action

logger = get_logger(__name__)

# Playwright text-engine selectors the model sometimes emits; not plain CSS.
TEXT_MATCHER_PATTERN = re.compile(r"text=|text\[|\[text=")

SUBMIT_BUTTON_NAME = re.compile(r"(submit|create|sign up|register)", re.IGNORECASE)


def is_text_matcher(selector: str) -> bool:
    return bool(TEXT_MATCHER_PATTERN.search(selector))


class ActionExecutor:
    """
    Runs each planned action independently.

    A missing value skips its fill, an unusable click selector is replaced by
    a role-based search for the submit button, and any single failure is
    logged without stopping the remaining actions.
    """

    def __init__(self, submit_button_name: Pattern[str] = SUBMIT_BUTTON_NAME):
        self.submit_button_name = submit_button_name
        self.logger = logger.bind(component="action_executor")

    async def execute(
        self,
        session,
        actions: Sequence[Action],
        data: Mapping[str, str]
    ) -> List[ActionOutcome]:
        """
        Execute ``actions`` in order.

        Args:
            session: Started browser session
            actions: Validated action plan
            data: Synthetic values keyed by field name

        Returns:
            One outcome per action, in plan order
        """
        outcomes = []
        for index, action in enumerate(actions):
            try:
                if isinstance(action, FillAction):
                    outcome = await self._fill(session, action, data)
                else:
                    outcome = await self._click(session, action)
            except ActionExecutionError as e:
                self.logger.error(
                    "Action failed",
                    step=index,
                    error=str(e.cause),
                    **log_action(action)
                )
                outcome = ActionOutcome(action=action, status=OutcomeStatus.FAILED, detail=str(e))

            outcomes.append(outcome)

        self.logger.info(
            "Actions executed",
            total=len(outcomes),
            failed=sum(1 for o in outcomes if o.status == OutcomeStatus.FAILED),
            skipped=sum(1 for o in outcomes if o.status == OutcomeStatus.SKIPPED)
        )
        return outcomes

    async def _fill(self, session, action: FillAction, data: Mapping[str, str]) -> ActionOutcome:
        resolved = resolve_field_value(action.field, data)
        if resolved is None:
            self.logger.warning("No value for field", **log_action(action))
            return ActionOutcome(
                action=action,
                status=OutcomeStatus.SKIPPED,
                detail=f"no value for field {action.field!r}"
            )

        key, value = resolved
        try:
            await session.fill(action.selector, value)
        except Exception as e:
            raise ActionExecutionError(action.type, action.selector, e) from e

        self.logger.info("Filled field", resolved_key=key, **log_action(action))
        return ActionOutcome(action=action, status=OutcomeStatus.FILLED, detail=key)

    async def _click(self, session, action: ClickAction) -> ActionOutcome:
        if is_text_matcher(action.selector):
            self.logger.warning("Discarding text-matcher selector", **log_action(action))
            await self._click_submit_fallback(session, action)
            return ActionOutcome(action=action, status=OutcomeStatus.CLICKED, detail="role fallback")

        try:
            await session.click(action.selector)
        except Exception as e:
            self.logger.warning(
                "Click failed, retrying with fallback",
                error=str(e),
                **log_action(action)
            )
            await self._click_submit_fallback(session, action)
            return ActionOutcome(action=action, status=OutcomeStatus.CLICKED, detail="role fallback")

        self.logger.info("Clicked element", **log_action(action))
        return ActionOutcome(action=action, status=OutcomeStatus.CLICKED, detail=action.selector)

    async def _click_submit_fallback(self, session, action: ClickAction) -> None:
        try:
            await session.click_button_by_name(self.submit_button_name)
        except Exception as e:
            raise ActionExecutionError(action.type, action.selector, e) from e
        self.logger.info("Clicked submit button by role", pattern=self.submit_button_name.pattern)
