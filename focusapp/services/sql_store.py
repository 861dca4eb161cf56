from datetime import date
from typing import Any
from sqlalchemy import and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .. import models
from ..errors import StoreQueryError, StoreUpdateError
from ..log import get_logger
from ..schemas import DayWindow, FocusRow
from .store import FocusStore

log = get_logger(__name__)

R = models.FocusRowRecord
WRITABLE = {"focus": R.focus}

def _to_row(rec: models.FocusRowRecord) -> FocusRow:
    return FocusRow(
        id=str(rec.id),
        day=rec.day.isoformat() if rec.day else None,
        subject=rec.subject,
        focus=rec.focus,
    )


class SqlFocusStore(FocusStore):
    """
    Focus rows in a SQL table. `accumulate` is a single UPDATE adding the delta
    in the database, so concurrent requests cannot lose each other's minutes.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def query_day(self, window: DayWindow, subject: str | None = None, limit: int = 100) -> list[FocusRow]:
        start = date.fromisoformat(window.today)
        end = date.fromisoformat(window.tomorrow)
        db: Session = self.session_factory()
        try:
            q = db.query(R).filter(and_(R.day >= start, R.day < end))
            if subject is not None:
                q = q.filter(R.subject == subject)
            return [_to_row(r) for r in q.order_by(R.id.asc()).limit(limit).all()]
        except SQLAlchemyError as e:
            log.warning("[sql] query failed: %s", e)
            raise StoreQueryError(detail=str(e))
        finally:
            db.close()

    def update_fields(self, row_id: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(WRITABLE)
        if unknown:
            raise StoreUpdateError(detail=f"not writable: {sorted(unknown)}")
        self._update(row_id, {WRITABLE[k]: v for k, v in fields.items()})

    def accumulate(self, row: FocusRow, minutes: int) -> int:
        return self._update(row.id, {R.focus: func.coalesce(R.focus, 0) + minutes})

    def _update(self, row_id: str, values: dict) -> int:
        try:
            pk = int(row_id)
        except ValueError:
            raise StoreUpdateError(detail=f"bad row id {row_id!r}", status=404)

        db: Session = self.session_factory()
        try:
            n = db.query(R).filter(R.id == pk).update(values, synchronize_session=False)
            if n == 0:
                db.rollback()
                raise StoreUpdateError(detail="row not found", status=404)
            # read back inside the same transaction, before the row lock is released
            focus = db.query(R.focus).filter(R.id == pk).scalar()
            db.commit()
            return int(focus or 0)
        except (SQLAlchemyError, OverflowError) as e:  # OverflowError: past the INTEGER range
            db.rollback()
            log.warning("[sql] update failed for %s: %s", row_id, e)
            raise StoreUpdateError(detail=str(e))
        finally:
            db.close()
