"""Error taxonomy shared by the auth, collector and API layers.

Each error carries the HTTP status and the generic category string that the
API returns to clients.  The concrete class is only visible server-side.
"""

from __future__ import annotations


class PanelError(Exception):
    status_code: int = 500
    category: str = "internal_error"


class AuthError(PanelError):
    status_code = 401
    category = "unauthorized"


class InvalidCredentials(AuthError):
    pass


class MissingToken(AuthError):
    pass


class MalformedToken(AuthError):
    pass


class ExpiredToken(AuthError):
    pass


class TooManyAttempts(PanelError):
    status_code = 429
    category = "too_many_attempts"

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"login throttled for {retry_after:.0f}s")
        self.retry_after = retry_after


class MetricsUnavailable(PanelError):
    status_code = 503
    category = "metrics_unavailable"


class InternalFault(PanelError):
    pass
