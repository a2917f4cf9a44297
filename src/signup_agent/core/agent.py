"""Form agent orchestrating browser, model and executor for one signup run."""

from datetime import datetime
from typing import Callable, Optional

from signup_agent.browser.extractor import SelectorExtractor
from signup_agent.browser.session import BrowserSession, create_browser_session
from signup_agent.config import Settings, settings as default_settings
from signup_agent.core.errors import CollaboratorError
from signup_agent.core.executor import ActionExecutor
from signup_agent.core.models import RunReport, RunState, fill_fields
from signup_agent.llm.analyzer import FormAnalyzer
from signup_agent.llm.client import LLMClient
from signup_agent.llm.synthesizer import DataSynthesizer
from signup_agent.utils.artifacts import ScreenshotStore
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

RUN_STATE_ORDER = list(RunState)


class FormAgent:
    """
    Fills and submits a signup form on a single page.

    A run moves through navigate, snapshot, plan, synthesize and execute
    exactly once. Failures before execution abort the run, discard the
    screenshot and propagate. Failures of individual actions are recorded
    and the run continues. The browser session is closed on every path.
    """

    def __init__(
        self,
        session_factory: Callable[[], BrowserSession],
        analyzer: FormAnalyzer,
        synthesizer: DataSynthesizer,
        executor: Optional[ActionExecutor] = None,
        screenshots: Optional[ScreenshotStore] = None,
        extractor: Optional[SelectorExtractor] = None
    ):
        """
        Initialize the form agent.

        Args:
            session_factory: Builds a fresh, unstarted browser session per run
            analyzer: Plans actions from screenshot and selectors
            synthesizer: Produces values for the planned fields
            executor: Runs planned actions against the page
            screenshots: Where screenshots are written
            extractor: Captures interactive elements from the page
        """
        self.session_factory = session_factory
        self.analyzer = analyzer
        self.synthesizer = synthesizer
        self.executor = executor or ActionExecutor()
        self.screenshots = screenshots or ScreenshotStore()
        self.extractor = extractor or SelectorExtractor()
        self.logger = logger.bind(component="form_agent")

    def _transition(self, report: RunReport, state: RunState) -> None:
        current = RUN_STATE_ORDER.index(report.state)
        target = RUN_STATE_ORDER.index(state)
        if state is not RunState.CLOSED and target != current + 1:
            raise RuntimeError(f"Illegal run transition {report.state.value} -> {state.value}")
        report.state = state
        self.logger.debug("Run state changed", state=state.value)

    async def run(self, start_url: str, route: str = "") -> RunReport:
        """
        Fill the signup form reachable at ``start_url`` + ``route``.

        Args:
            start_url: Base URL of the site, already validated
            route: Optional client-side route such as ``/signup``

        Returns:
            Report of the planned actions and their outcomes

        Raises:
            CollaboratorError: If form analysis or data synthesis fails
        """
        report = RunReport(url=f"{start_url}{route}")
        session = self.session_factory()
        screenshot_path = None

        self.logger.info("Starting run", start_url=start_url, route=route)

        try:
            await session.start()
            await session.navigate(start_url, route)
            self._transition(report, RunState.NAVIGATED)

            screenshot_path = self.screenshots.new_path()
            screenshot = await session.screenshot(screenshot_path)
            report.screenshot_path = str(screenshot_path)
            report.elements = await self.extractor.extract(session)
            self._transition(report, RunState.SNAPSHOTTED)

            report.actions = await self.analyzer.analyze(screenshot, report.elements)
            self._transition(report, RunState.ACTIONS_PLANNED)
            self.logger.info("Actions planned", actions=[a.model_dump() for a in report.actions])

            report.data = await self.synthesizer.synthesize(fill_fields(report.actions))
            self._transition(report, RunState.DATA_SYNTHESIZED)

            self._transition(report, RunState.EXECUTING)
            report.outcomes = await self.executor.execute(session, report.actions, report.data)

        except CollaboratorError as e:
            self.logger.error(
                "Model call failed, aborting run",
                state=report.state.value,
                error=str(e),
                error_type=type(e).__name__,
                response_preview=e.response_preview
            )
            self._discard_screenshot(report, screenshot_path)
            raise

        except Exception as e:
            self.logger.error(
                "Run failed",
                state=report.state.value,
                error=str(e),
                error_type=type(e).__name__
            )
            self._discard_screenshot(report, screenshot_path)
            raise

        finally:
            await session.close()
            self._transition(report, RunState.CLOSED)
            report.finished_at = datetime.now()

        self.logger.info(
            "Run completed",
            url=report.url,
            actions=len(report.actions),
            failed=report.failed_count,
            screenshot=report.screenshot_path
        )
        return report

    def _discard_screenshot(self, report: RunReport, path) -> None:
        self.screenshots.discard(path)
        report.screenshot_path = None


def create_form_agent(settings: Optional[Settings] = None, openai_client=None) -> FormAgent:
    """
    Build a form agent wired from settings.

    Args:
        settings: Settings to configure the browser, model and screenshots
        openai_client: Optional pre-built ``AsyncOpenAI`` client

    Returns:
        Ready-to-run FormAgent
    """
    settings = settings or default_settings
    llm_client = LLMClient(openai_client=openai_client, settings=settings)

    return FormAgent(
        session_factory=lambda: create_browser_session(settings),
        analyzer=FormAnalyzer(llm_client),
        synthesizer=DataSynthesizer(llm_client),
        executor=ActionExecutor(),
        screenshots=ScreenshotStore(settings.screenshot_dir)
    )
