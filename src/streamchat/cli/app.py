"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..conversation import PERSONAS, Role, Snapshot
from ..errors import ChatError
from .providers import get_session

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="streamchat",
    help="Terminal chat client that streams replies from a completion endpoint",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()
err_console = Console(stderr=True)


def _console_debug_callback(level: str, component: str, message: str) -> None:
    colors = {"debug": "dim", "info": "cyan", "warning": "yellow", "error": "red"}
    err_console.print(
        f"[{colors.get(level, 'white')}]{level.upper():<7}[/] [bold]\\[{component}][/] {message}",
        highlight=False,
    )


@app.command()
def chat(
    persona: str = typer.Option(
        None,
        "--persona",
        "-p",
        help="Persona seeding the system message (Developer, Scientist, Executive, Generic)"
    ),
    backend: str = typer.Option(
        None,
        "--backend",
        "-b",
        help="Completion backend: http or openai"
    ),
    endpoint: str = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Base URL of the completion endpoint"
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level (debug, info, warning, error)"
    ),
):
    """Open the interactive chat UI."""
    from ..ui import run_textual_tui

    session = get_session(persona, backend, endpoint, console)
    asyncio.run(run_textual_tui(session, log_level=log_level))


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Message to send"),
    persona: str = typer.Option(
        None,
        "--persona",
        "-p",
        help="Persona seeding the system message"
    ),
    backend: str = typer.Option(
        None,
        "--backend",
        "-b",
        help="Completion backend: http or openai"
    ),
    endpoint: str = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Base URL of the completion endpoint"
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Print trace messages to stderr"
    ),
):
    """Send a single message and stream the reply to stdout."""
    session = get_session(persona, backend, endpoint, console)
    if log_level is not None:
        session.set_debug_callback(_console_debug_callback)

    if session.needs_credentials():
        console.print("[red]Error: no valid API key. Set OPENAI_API_KEY (sk-...).[/red]")
        raise typer.Exit(code=1)

    printed = {"id": None, "length": 0}

    def _echo(snapshot: Snapshot) -> None:
        if not snapshot or snapshot[-1].role != Role.ASSISTANT:
            return
        reply = snapshot[-1]
        if reply.id != printed["id"]:
            printed["id"], printed["length"] = reply.id, 0
        console.print(reply.text[printed["length"]:], end="", markup=False, highlight=False)
        printed["length"] = len(reply.text)

    session.store.subscribe(_echo)

    async def _ask():
        try:
            await session.send_message(prompt)
        finally:
            await session.client.close()

    try:
        asyncio.run(_ask())
    except ChatError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print()


@app.command()
def personas():
    """List the available personas."""
    table = Table(title="Personas")
    table.add_column("Name", style="cyan")
    table.add_column("Shown as", style="green")
    table.add_column("Description")

    for persona, data in PERSONAS.items():
        table.add_row(persona.value, data.label, data.description)

    console.print(table)


if __name__ == "__main__":
    app()
