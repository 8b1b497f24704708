"""Failure classes reported to callers of :func:`design_exploder.exploder.explode`."""

from __future__ import annotations

from typing import Dict, Optional, Union


class ExplodeError(Exception):
    """Base class for extraction failures that reach the caller."""

    kind = "error"
    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Union[str, int]]:
        return {"error": self.kind, "message": self.message, "status": self.status}


class ValidationError(ExplodeError):
    """The target URL is missing or malformed; no network access happened."""

    kind = "validation_error"
    status = 400


class UpstreamFetchError(ExplodeError):
    """The target document could not be retrieved."""

    kind = "upstream_fetch_error"
    status = 502

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Union[str, int]]:
        payload = super().to_dict()
        if self.status_code is not None:
            payload["upstream_status"] = self.status_code
        return payload


class InternalError(ExplodeError):
    """Unexpected failure while parsing or extracting; details are only logged."""

    kind = "internal_error"
    status = 500
    GENERIC_MESSAGE = "Internal error while extracting assets"

    def __init__(self, message: str = GENERIC_MESSAGE) -> None:
        super().__init__(message)
