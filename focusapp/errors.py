from typing import Any


class FocusError(Exception):
    """Base for every failure that ends a request with an `{ok: false}` envelope."""

    status_code = 500
    error = "server error"

    def __init__(self, error: str | None = None, detail: Any = None, **extra: Any):
        self.error = error or self.error
        self.detail = detail
        self.extra = extra
        super().__init__(self.error)

    def to_payload(self) -> dict:
        body: dict[str, Any] = {"ok": False, "error": self.error}
        if self.detail is not None:
            body["detail"] = self.detail
        body.update(self.extra)
        return body


# ---------- 400 ----------
class ValidationError(FocusError):
    status_code = 400
    error = "invalid request"

class InvalidSubject(ValidationError):
    error = "invalid subject"

class InvalidMinutes(ValidationError):
    error = "invalid minutes"


# ---------- 401 ----------
class UnauthorizedError(FocusError):
    status_code = 401
    error = "invalid api key"


# ---------- 404 ----------
class NotFoundError(FocusError):
    status_code = 404
    error = "not found"

class NoRowsToday(NotFoundError):
    error = "no rows today"

class SubjectRowNotFound(NotFoundError):
    error = "row not found"

    def __init__(self, subject: str, available_subjects: list[str]):
        super().__init__(available_subjects=list(available_subjects))
        self.subject = subject
        self.available_subjects = list(available_subjects)


# ---------- 500 ----------
class ConfigurationError(FocusError):
    status_code = 500
    error = "missing env"

class RemoteStoreError(FocusError):
    """The record store answered with a failure (or not at all)."""
    status_code = 500
    error = "store request failed"

    def __init__(self, error: str | None = None, detail: Any = None, status: int | None = None):
        super().__init__(error, detail)
        self.status = status

class StoreQueryError(RemoteStoreError):
    error = "notion query failed"

class StoreUpdateError(RemoteStoreError):
    error = "notion update failed"
