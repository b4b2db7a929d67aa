from typing import Protocol

from app.models.schemas import ExpenseRecord, ResolvedDate, Session


class RecordSink(Protocol):
    async def create(self, session: Session, resolved_date: ResolvedDate) -> ExpenseRecord:
        """Write one new record. Raises SinkError on failure."""
        ...


def build_record(session: Session, resolved_date: ResolvedDate) -> ExpenseRecord:
    if not session.is_complete:
        raise ValueError(f"Session of user {session.user_id} is not complete")
    return ExpenseRecord(
        date=resolved_date.iso_date,
        month=resolved_date.month_name,
        year=resolved_date.year,
        title=session.title,
        category=session.category,
        subcategory=session.subcategory,
        amount=session.amount,
        currency=session.currency,
        account=session.account,
    )
