from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Date, Index, Integer, String
Base = declarative_base()

class FocusRowRecord(Base):
    """One subject on one civil day. Provisioned outside this service; never inserted here."""
    __tablename__ = "focus_rows"
    id = Column(Integer, primary_key=True, autoincrement=True)
    day = Column(Date, nullable=False)                    # civil day in the configured zone
    subject = Column(String, nullable=False)              # label from the closed subject set
    focus = Column(Integer, nullable=True, default=0)     # accumulated minutes

    __table_args__ = (
        # one row per (day, subject) is expected but not enforced
        Index("ix_focus_rows_day_subject", "day", "subject"),
    )
