"""
Medo — Error Taxonomy
======================
Every failure a flow can surface. Each class also derives from the builtin
the rest of the codebase already catches (ValueError / RuntimeError), and
carries the HTTP status the API answers with.
"""


class FlowError(Exception):
    """Base class for every error raised by the flow layer."""
    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidInput(FlowError, ValueError):
    """The caller's request violates a required constraint. Raised before any model call."""
    status_code = 400


class ModelCallFailed(FlowError, RuntimeError):
    """The hosted model call itself failed (network, auth, quota, missing key)."""
    status_code = 503


class MalformedModelOutput(FlowError, ValueError):
    """The model answered, but its content is not valid JSON or violates the output schema."""
    status_code = 502


class NoAudioProduced(FlowError, RuntimeError):
    """The speech model returned no audio payload."""
    status_code = 502


class SessionNotFound(FlowError, LookupError):
    status_code = 404


class DeadlineExceeded(FlowError, TimeoutError):
    """Raised by the API layer when a flow outlives AI_TIMEOUT_SECONDS."""
    status_code = 504


def describe_validation_error(e) -> str:
    """One-line summary of the first error in a pydantic ValidationError."""
    first = e.errors()[0]
    location = ".".join(str(p) for p in first.get("loc", ())) or "request"
    return f"{location}: {first.get('msg', 'invalid value')}"
