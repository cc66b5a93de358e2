from __future__ import annotations


class RefinementTransportError(RuntimeError):
    """Raised when a remote rewrite could not be fetched."""

    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class MissingCredentialsError(RefinementTransportError):
    """Raised by the proxy transport when no signed-in user can supply a token."""

    def __init__(self, message: str = "No signed-in user for proxy request") -> None:
        super().__init__(message, status_code=None, detail=None)
