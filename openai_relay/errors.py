"""Error taxonomy for the relay handlers.

Every failure the relay knows how to describe is raised as a ``RelayError``
at the point of detection and rendered into a terminal response at the
handler boundary. Nothing here is allowed to escape to the ASGI server.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class RelayError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message, **self.extra}


class MethodNotAllowed(RelayError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    error = "Method Not Allowed"


class ServerMisconfigured(RelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Server Configuration Error"


class BadRequest(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class UpstreamUnreachable(RelayError):
    """Transport failure before the provider produced any response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"


class UpstreamError(RelayError):
    """The provider answered, but with a failure status or an unreadable body.

    ``status_code`` is always the provider's own status.
    """

    error = "OpenAI API Error"
