"""Exception hierarchy for streamchat.

Every failure in a chat turn surfaces as a ChatError subclass so callers
can decide how to present it. None of these are retried automatically.
"""


class ChatError(Exception):
    """Base class for chat errors."""


class CredentialError(ChatError):
    """The API key is missing or malformed. No request was attempted."""

    def __init__(self, message: str = "API key is missing or invalid"):
        super().__init__(message)


class SessionBusyError(ChatError):
    """A reply is still streaming for this session."""

    def __init__(self, message: str = "A reply is still being received"):
        super().__init__(message)


class PersonaLockedError(ChatError):
    """The persona cannot change once the conversation has started."""

    def __init__(self, message: str = "Persona is fixed once the conversation has begun"):
        super().__init__(message)


class CompletionError(ChatError):
    """Terminal failure of a completion stream."""


class CompletionConnectionError(CompletionError):
    """Transport failure while talking to the completion endpoint."""

    def __init__(self, message: str):
        super().__init__(f"Connection error: {message}")


class CompletionHTTPError(CompletionError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        msg = f"Completion endpoint returned HTTP {status_code}"
        if body:
            msg += f": {body[:200]}"
        super().__init__(msg)
        self.status_code = status_code
        self.body = body


class StreamDecodeError(CompletionError):
    """The response stream is not valid UTF-8."""

    def __init__(self, message: str):
        super().__init__(f"Malformed response stream: {message}")
