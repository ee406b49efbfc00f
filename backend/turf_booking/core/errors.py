"""
Domain errors raised by the admission layer.

Each error carries a stable machine-readable code and the HTTP status the
API layer renders it with, so callers can tell a malformed request from an
occupied slot without parsing messages.
"""

from fastapi import status


class AdmissionError(Exception):
    """Base class for every recoverable admission failure."""

    code = "admission_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.detail}


class InvalidRequest(AdmissionError):
    """Malformed window: missing field, non-integer hour, bad date, empty range."""

    code = "invalid_request"
    status_code = 422


class SlotOccupied(AdmissionError):
    """The requested window overlaps a committed booking or block."""

    code = "slot_occupied"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, detail: str, conflicts: list | None = None):
        super().__init__(detail)
        self.conflicts = conflicts or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["conflicts"] = [
            {"start_hour": c.start_hour, "end_hour": c.end_hour, "kind": c.kind}
            for c in self.conflicts
        ]
        return body


class Forbidden(AdmissionError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AdmissionError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class IntervalConflict(Exception):
    """
    Raised by the interval store when a commit would overlap a stored interval.

    `conflicts` is empty when the commit lost every attempt to concurrent
    writers on the same turf and date.
    """

    def __init__(self, conflicts: list | None = None):
        self.conflicts = conflicts or []
        super().__init__(f"{len(self.conflicts)} overlapping interval(s)")
