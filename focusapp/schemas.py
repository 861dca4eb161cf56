import math
from typing import Any
from pydantic import BaseModel, Field, field_validator

from .errors import InvalidMinutes, InvalidSubject

class DayWindow(BaseModel):
    today: str       # "YYYY-MM-DD", inclusive
    tomorrow: str    # "YYYY-MM-DD", exclusive

class FocusRow(BaseModel):
    id: str
    day: str | None = None
    subject: str | None = None
    focus: int = 0

    @field_validator("focus", mode="before")
    @classmethod
    def _safe_focus(cls, v: Any) -> int:
        # never trust the remote shape: anything unusable counts as a fresh base
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0
        if not math.isfinite(v):
            return 0
        return int(v)

class AccumulateRequest(BaseModel):
    subject: str = Field(..., min_length=1)
    minutes: float = Field(..., ge=0)

    @property
    def whole_minutes(self) -> int:
        return math.floor(self.minutes)

class AccumulateResult(BaseModel):
    saved_minutes: int
    new_focus: int

class SaveResponse(AccumulateResult):
    ok: bool = True


def parse_accumulate_request(payload: Any) -> AccumulateRequest:
    """Validate a raw JSON body. Only `subject` and `minutes` are looked at."""
    if not isinstance(payload, dict):
        payload = {}

    subject = payload.get("subject")
    if not isinstance(subject, str) or not subject.strip():
        raise InvalidSubject()

    minutes = payload.get("minutes")
    # bool is an int subclass; "10" is not a number
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        raise InvalidMinutes()
    try:
        value = float(minutes)
    except OverflowError:
        raise InvalidMinutes()
    if not math.isfinite(value) or value < 0:
        raise InvalidMinutes()

    return AccumulateRequest(subject=subject, minutes=value)
