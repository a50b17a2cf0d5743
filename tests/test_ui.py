"""Tests for the Textual binding, driven through the app pilot."""
import pytest
from textual.widgets import Button, Input

from conftest import END, QueueCompletionClient, wait_until
from streamchat.errors import CompletionConnectionError
from streamchat.session import ChatSession
from streamchat.settings.in_memory import InMemoryCredentialStore
from streamchat.ui import ChatApp
from streamchat.ui.screens import SettingsScreen
from streamchat.ui.widgets import ChatHistoryWidget, ChatInputBar, MessageView


@pytest.mark.asyncio
async def test_settings_shown_without_key():
    """Test that a missing key opens the settings dialog at startup."""
    session = ChatSession(QueueCompletionClient(), InMemoryCredentialStore(None))
    app = ChatApp(session)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.screen, SettingsScreen)


@pytest.mark.asyncio
async def test_settings_rejects_then_saves_key(api_key):
    credentials = InMemoryCredentialStore(None)
    app = ChatApp(ChatSession(QueueCompletionClient(), credentials))

    async with app.run_test() as pilot:
        await pilot.pause()
        screen = app.screen
        field = screen.query_one("#api-key-input", Input)

        field.value = "not-a-key"
        screen._save()
        await pilot.pause()
        assert app.screen is screen
        assert credentials.load() is None

        field.value = api_key
        screen._save()
        await pilot.pause()
        assert not isinstance(app.screen, SettingsScreen)
        assert credentials.load() == api_key


@pytest.mark.asyncio
async def test_reply_renders_in_history(session, client):
    """Test that a turn shows system, user and assistant entries."""
    client.feed("Hel", "lo", END)
    app = ChatApp(session)

    async with app.run_test() as pilot:
        await pilot.pause()
        await app._send("hi").wait()
        await pilot.pause()

        views = list(app.query(MessageView))
        assert len(views) == 3
        assert views[-1].message.text == "Hello"
        assert app.query_one("#chat-history", ChatHistoryWidget).get_last_response() == "Hello"
        assert not app.query_one("#persona-selector").display
        assert not app.query_one("#chat-input-bar", ChatInputBar).busy


@pytest.mark.asyncio
async def test_delete_removes_view(session, client):
    client.feed("ok", END)
    app = ChatApp(session)

    async with app.run_test() as pilot:
        await app._send("hi").wait()
        await pilot.pause()

        reply = session.messages[-1]
        app.post_message(MessageView.DeleteRequested(reply.id))
        await pilot.pause()

        assert len(app.query(MessageView)) == 2
        assert session.store.get(reply.id) is None


@pytest.mark.asyncio
async def test_clear_shows_persona_selector(session, client):
    client.feed("ok", END)
    app = ChatApp(session)

    async with app.run_test() as pilot:
        await app._send("hi").wait()
        await pilot.pause()

        app.action_clear_chat()
        await pilot.pause()

        assert len(app.query(MessageView)) == 0
        assert app.query_one("#persona-selector").display


@pytest.mark.asyncio
async def test_send_disabled_while_streaming(session, client):
    """Test that Send is disabled until the reply settles."""
    client.feed("Hel")
    app = ChatApp(session)

    async with app.run_test() as pilot:
        worker = app._send("hi")
        await wait_until(lambda: session.messages and session.messages[-1].text == "Hel")
        await pilot.pause()

        bar = app.query_one("#chat-input-bar", ChatInputBar)
        assert bar.busy
        assert app.query_one("#send-btn", Button).disabled

        client.feed("lo", END)
        await worker.wait()
        await pilot.pause()

        assert not bar.busy
        assert not app.query_one("#send-btn", Button).disabled


@pytest.mark.asyncio
async def test_send_enabled_after_stream_failure(session, client):
    """Test that a failed reply re-enables the composer and keeps partial text."""
    client.feed("Par", CompletionConnectionError("reset by peer"))
    app = ChatApp(session)

    async with app.run_test() as pilot:
        await app._send("hi").wait()
        await pilot.pause()

        assert not session.busy
        assert not app.query_one("#chat-input-bar", ChatInputBar).busy
        assert not app.query_one("#send-btn", Button).disabled
        assert session.messages[-1].text == "Par"


@pytest.mark.asyncio
async def test_copy_last_response(session, client, monkeypatch):
    client.feed("Hel", "lo", END)
    app = ChatApp(session)
    copied = []
    monkeypatch.setattr(app, "copy_to_clipboard", copied.append)

    async with app.run_test() as pilot:
        app.action_copy_last_response()
        assert copied == []

        await app._send("hi").wait()
        await pilot.pause()
        app.action_copy_last_response()

        assert copied == ["Hello"]
