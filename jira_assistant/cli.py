"""Command-line front end: one-shot query, connection check, or an interactive prompt."""
import argparse
import asyncio
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown

from jira_assistant.assistant import JiraAssistant
from jira_assistant.chat import strip_mentions
from jira_assistant.config import Settings
from jira_assistant.errors import ConfigError

console = Console()


def setup_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


async def run_once(assistant: JiraAssistant, text: str):
    with console.status("[bold green]Thinking..."):
        reply = await assistant.respond(strip_mentions(text))
    console.print(Markdown(reply))


async def run_interactive(assistant: JiraAssistant):
    console.rule(f"[bold blue]Jira assistant · {assistant.settings.project_key}")
    while True:
        try:
            text = console.input("[bold cyan]> [/bold cyan]")
        except (EOFError, KeyboardInterrupt):
            break
        if text.strip().lower() in ("exit", "quit"):
            break
        await run_once(assistant, text)


async def run(args, settings: Settings):
    assistant = JiraAssistant.build(settings)
    try:
        if args.check:
            await run_once(assistant, "test connection")
        elif args.query:
            await run_once(assistant, args.query)
        else:
            await run_interactive(assistant)
    finally:
        await assistant.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ask Jira questions in plain English.")
    parser.add_argument("-q", "--query", help="request to run once, e.g. 'high priority bugs'")
    parser.add_argument("--check", action="store_true", help="test the Jira connection and exit")
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(2)

    setup_logging(args.log_level or settings.log_level)
    asyncio.run(run(args, settings))

if __name__ == "__main__":
    main()
