import unicodedata
from typing import Iterable, Literal

from ..errors import NoRowsToday, SubjectRowNotFound
from ..log import get_logger
from ..schemas import AccumulateRequest, AccumulateResult, DayWindow, FocusRow
from .store import FocusStore

log = get_logger(__name__)

def normalize_subject(subject: str | None) -> str:
    """NFC + trimmed. Case is kept: select options are case-sensitive labels."""
    if not subject:
        return ""
    return unicodedata.normalize("NFC", subject).strip()

def locate_row(rows: Iterable[FocusRow], subject: str) -> FocusRow | None:
    """First row (in the order the store returned them) whose subject matches."""
    want = normalize_subject(subject)
    for row in rows:
        if normalize_subject(row.subject) == want:
            return row
    return None

def available_subjects(rows: Iterable[FocusRow]) -> list[str]:
    seen: list[str] = []
    for row in rows:
        s = normalize_subject(row.subject)
        if s and s not in seen:
            seen.append(s)
    return seen

def _find(
    store: FocusStore,
    window: DayWindow,
    subject: str,
    strategy: Literal["client", "server"],
    limit: int,
) -> FocusRow:
    if strategy == "server":
        # filter pushed down; still re-checked here so both strategies agree
        row = locate_row(store.query_day(window, subject=normalize_subject(subject), limit=limit), subject)
        if row:
            return row

    rows = store.query_day(window, limit=limit)
    if not rows:
        raise NoRowsToday(detail={"today": window.today})
    row = locate_row(rows, subject)
    if row is None and strategy == "client" and len(rows) >= limit:
        # day listing was cut at `limit`; the row may sit past it
        row = locate_row(store.query_day(window, subject=normalize_subject(subject), limit=limit), subject)
    if row is None:
        raise SubjectRowNotFound(subject, available_subjects(rows))
    return row

def record_focus(
    store: FocusStore,
    req: AccumulateRequest,
    window: DayWindow,
    strategy: Literal["client", "server"] = "client",
    limit: int = 100,
) -> AccumulateResult:
    """
    Add `req.minutes` (whole minutes only) to today's row for `req.subject`.

    Never creates a row. No retries: a failed query or write ends the request,
    and the caller cannot tell a failed write from one that landed before the
    error was seen, so resubmitting may count the minutes twice.
    """
    minutes = req.whole_minutes
    try:
        row = _find(store, window, req.subject, strategy, limit)
    except SubjectRowNotFound as e:
        log.info("[focus] no %r row on %s (have: %s)", req.subject, window.today, ", ".join(e.available_subjects))
        raise
    except NoRowsToday:
        log.info("[focus] no rows at all on %s", window.today)
        raise

    new_focus = store.accumulate(row, minutes)
    log.info("[focus] %s %r +%d -> %d (row %s)", window.today, req.subject, minutes, new_focus, row.id)
    return AccumulateResult(saved_minutes=minutes, new_focus=new_focus)
