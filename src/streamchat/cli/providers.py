"""Provider factory functions for CLI.

Centralizes creation of the completion client, credential store and chat
session from environment variables. Hides configuration details from
command implementations.
"""

import os

from rich.console import Console

from ..conversation import DEFAULT_PERSONA, Persona
from ..llm import CompletionClient, create_completion_client
from ..session import ChatSession
from ..settings import CredentialStore, create_credential_store

# Default console for output
_console = Console()


def get_completion_client(
    backend: str | None = None,
    endpoint: str | None = None,
    console: Console | None = None,
) -> CompletionClient:
    """Create the completion client from options and environment variables.

    Args:
        backend: Overrides STREAMCHAT_BACKEND
        endpoint: Overrides STREAMCHAT_ENDPOINT
        console: Optional Rich console for output

    Returns:
        Completion client instance

    Raises:
        SystemExit: If the backend is unknown

    Environment variables:
        STREAMCHAT_BACKEND: http or openai (default: http)
        STREAMCHAT_ENDPOINT: Base URL of the chat endpoint (default: http://localhost:3000)
        STREAMCHAT_PATH: Endpoint path (default: /api/chat)
        STREAMCHAT_TIMEOUT: Timeout in seconds (default: 60)
        STREAMCHAT_MODEL: Model for the openai backend (default: gpt-4)
    """
    import typer

    con = console or _console
    backend = (backend or os.getenv("STREAMCHAT_BACKEND", "http")).lower()

    if backend == "http":
        return create_completion_client(
            "http",
            base_url=endpoint or os.getenv("STREAMCHAT_ENDPOINT", "http://localhost:3000"),
            path=os.getenv("STREAMCHAT_PATH", "/api/chat"),
            timeout=float(os.getenv("STREAMCHAT_TIMEOUT", "60")),
        )

    elif backend == "openai":
        return create_completion_client(
            "openai",
            model=os.getenv("STREAMCHAT_MODEL", "gpt-4"),
            base_url=endpoint or os.getenv("OPENAI_BASE_URL") or None,
        )

    con.print(f"[red]Error: Unknown backend: {backend}[/red]")
    raise typer.Exit(code=1)


def get_credential_store(console: Console | None = None) -> CredentialStore:
    """Create the credential store from environment variables.

    Raises:
        SystemExit: If the backend is unknown

    Environment variables:
        STREAMCHAT_CREDENTIALS: env, file or memory (default: env)
        STREAMCHAT_CREDENTIALS_PATH: Settings file for the file backend
        OPENAI_API_KEY: The key read by the env backend
    """
    import typer

    con = console or _console
    backend = os.getenv("STREAMCHAT_CREDENTIALS", "env").lower()
    config = {}
    if backend == "file" and os.getenv("STREAMCHAT_CREDENTIALS_PATH"):
        config["path"] = os.getenv("STREAMCHAT_CREDENTIALS_PATH")
    try:
        return create_credential_store(backend, **config)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


def get_persona(persona: str | None = None, console: Console | None = None) -> Persona:
    """Resolve the persona from an option or STREAMCHAT_PERSONA.

    Raises:
        SystemExit: If the name is not a known persona
    """
    import typer

    con = console or _console
    name = persona or os.getenv("STREAMCHAT_PERSONA", DEFAULT_PERSONA.value)
    for candidate in Persona:
        if candidate.value.lower() == name.lower():
            return candidate
    choices = ", ".join(p.value for p in Persona)
    con.print(f"[red]Error: Unknown persona: {name}. Choose one of: {choices}[/red]")
    raise typer.Exit(code=1)


def get_session(
    persona: str | None = None,
    backend: str | None = None,
    endpoint: str | None = None,
    console: Console | None = None,
) -> ChatSession:
    """Build a ChatSession wired to the configured client and credentials."""
    return ChatSession(
        client=get_completion_client(backend, endpoint, console),
        credentials=get_credential_store(console),
        persona=get_persona(persona, console),
    )
