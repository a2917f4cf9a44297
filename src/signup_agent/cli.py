"""Command-line interface for the signup form agent."""

import asyncio
import re
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from signup_agent.config import settings
from signup_agent.core.errors import InvalidUrlError, SignupAgentError
from signup_agent.core.models import RunReport
from signup_agent.utils.logging import configure_logging

app = typer.Typer(
    name="signup-agent",
    help="Signup Form Agent - fills signup forms with AI-generated user data",
    add_completion=False,
)
console = Console()

URL_PATTERN = re.compile(r"https?://[^\s\"'<>]+", re.IGNORECASE)
# A whole message that is nothing but a scheme-less address, e.g. "example.com".
BARE_DOMAIN_PATTERN = re.compile(r"(?:www\.)?[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}(?::\d+)?(?:/\S*)?", re.IGNORECASE)
# Scheme-less addresses inside a sentence: only "www." hosts or hosts followed by a path.
EMBEDDED_DOMAIN_PATTERN = re.compile(
    r"(?<![\w@./])(?:www\.[a-z0-9-]+(?:\.[a-z0-9-]+)+|[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}/)\S*",
    re.IGNORECASE,
)
EXIT_WORDS = {"exit", "quit", "bye"}


def validate_url(url: str) -> str:
    """Return ``url`` stripped, or raise InvalidUrlError unless it is http(s)."""
    url = (url or "").strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        raise InvalidUrlError(url)
    if not re.match(r"https?://[^\s/]+", url):
        raise InvalidUrlError(url, "URL has no host")
    return url


def normalize_route(route: Optional[str]) -> str:
    """Ensure a non-empty route starts with ``/``."""
    route = (route or "").strip()
    if not route:
        return ""
    return route if route.startswith("/") else f"/{route}"


def extract_url(text: str) -> Optional[str]:
    """
    Pull an http(s) URL out of free text.

    Returns None when the text is ordinary chat. Dotted words such as
    "node.js", "notes.txt" or an email address are not treated as URLs.

    Raises:
        InvalidUrlError: If the text is a bare domain, or mentions a
            ``www.`` host or a domain with a path, without a scheme
    """
    match = URL_PATTERN.search(text)
    if match:
        return validate_url(match.group(0).rstrip(".,;:!?)"))

    stripped = text.strip()
    if BARE_DOMAIN_PATTERN.fullmatch(stripped):
        raise InvalidUrlError(stripped)

    embedded = EMBEDDED_DOMAIN_PATTERN.search(text)
    if embedded:
        raise InvalidUrlError(embedded.group(0).rstrip(".,;:!?)"))
    return None


def _print_report(report: RunReport) -> None:
    table = Table(title=f"Form run on {escape(report.url)}")
    table.add_column("#", style="dim")
    table.add_column("Action", style="cyan")
    table.add_column("Selector")
    table.add_column("Status", style="green")
    table.add_column("Detail")

    for index, outcome in enumerate(report.outcomes, start=1):
        status = outcome.status.value
        style = "red" if status == "failed" else "yellow" if status == "skipped" else "green"
        table.add_row(
            str(index),
            outcome.action.type,
            escape(outcome.action.selector),
            f"[{style}]{status}[/{style}]",
            escape(outcome.detail or ""),
        )

    console.print(table)
    if report.screenshot_path:
        console.print(f"📸 Screenshot saved to {report.screenshot_path}")


def _require_credential() -> None:
    if not settings.gemini_api_key:
        console.print("❌ GEMINI_API_KEY is not set; add it to the environment or .env file")
        raise typer.Exit(code=1)


async def _run_agent(start_url: str, route: str) -> RunReport:
    from signup_agent.core.agent import create_form_agent

    agent = create_form_agent(settings)
    return await agent.run(start_url, route)


@app.command()
def fill(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Base URL, e.g. https://example.com"),
    route: Optional[str] = typer.Option(None, "--route", "-r", help="Route to the form, e.g. /signup"),
) -> None:
    """Open a page, fill its signup form and submit it."""
    if url is None:
        url = typer.prompt("Enter the base URL (e.g., https://example.com)")
    if route is None:
        route = typer.prompt("Enter the route/path (e.g., /signup, press Enter if none)", default="", show_default=False)

    try:
        start_url = validate_url(url)
    except InvalidUrlError as e:
        console.print(f"❌ {escape(str(e))}")
        raise typer.Exit(code=2)

    _require_credential()
    configure_logging(settings)

    normalized_route = normalize_route(route)
    console.print(f"🔗 Navigating to: {start_url}{normalized_route}")

    try:
        report = asyncio.run(_run_agent(start_url, normalized_route))
    except SignupAgentError as e:
        console.print(f"❌ Run aborted: {escape(str(e))}")
        raise typer.Exit(code=1)

    _print_report(report)
    if report.failed_count:
        console.print(f"⚠️  {report.failed_count} action(s) failed")


def _create_llm_client():
    from signup_agent.llm.client import LLMClient

    return LLMClient(settings=settings)


async def _chat_session() -> None:
    """Read lines until an exit word; every reply and run shares one event loop."""
    from signup_agent.llm.responder import ConversationalResponder

    llm_client = _create_llm_client()
    responder = ConversationalResponder(llm_client)
    console.print("💬 Type a message or paste a signup page URL ('exit' to quit).")

    try:
        while True:
            text = await asyncio.to_thread(typer.prompt, "You", default="", show_default=False)
            text = text.strip()
            if not text:
                continue
            if text.lower() in EXIT_WORDS:
                console.print("👋 Bye!")
                break

            try:
                url = extract_url(text)
            except InvalidUrlError as e:
                console.print(f"❌ {escape(str(e))}")
                continue

            try:
                if url:
                    console.print(f"🔗 Navigating to: {url}")
                    _print_report(await _run_agent(url, ""))
                else:
                    console.print(f"🤖 {escape(await responder.reply(text))}")
            except SignupAgentError as e:
                console.print(f"❌ {escape(str(e))}")
    finally:
        await llm_client.close()


@app.command()
def chat() -> None:
    """Chat with the agent; paste a URL to have its form filled."""
    _require_credential()
    configure_logging(settings)

    asyncio.run(_chat_session())


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="Signup Form Agent Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Show non-sensitive settings
    table.add_row("Model", settings.llm_model)
    table.add_row("Model Endpoint", settings.llm_base_url)
    table.add_row("Browser Headless", str(settings.browser_headless))
    table.add_row("Browser Slow-Mo (ms)", str(settings.browser_slow_mo_ms))
    table.add_row("Settle Delay (ms)", str(settings.settle_delay_ms))
    table.add_row("Screenshot Directory", settings.screenshot_dir)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command()
def check() -> None:
    """Test the setup and configuration."""
    console.print("🔍 Testing Signup Form Agent setup...")

    if settings.gemini_api_key:
        console.print("✅ Gemini API key configured")
    else:
        console.print("❌ Gemini API key missing")
        raise typer.Exit(code=1)

    console.print("\n🎯 Setup test complete!")


@app.command()
def version() -> None:
    """Show version information."""
    from signup_agent import __version__
    console.print(f"Signup Form Agent v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
