"""Read-only access to a persona's accounts and transactions."""
import re
from datetime import date
from typing import Iterable, Optional

from openbank.errors import InternalError
from openbank.fixtures import FixtureStore
from openbank.logging import get_logger
from openbank.schemas import Account, PersonaData, SessionContext, Transaction
from openbank import metrics

logger = get_logger(__name__)

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_date_bound(value: Optional[str]) -> Optional[date]:
    """
    Parse a YYYY-MM-DD calendar date used as a filter bound.

    Returns None for absent, empty or unparseable values. Callers treat None
    as "no bound", so a typo yields unfiltered data rather than an error.
    """
    if not value:
        return None
    value = value.strip()
    if not ISO_DATE_PATTERN.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def filter_transactions(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Transaction]:
    """Keep transactions with start <= date <= end, preserving input order."""
    return [
        txn for txn in transactions
        if (start is None or txn.date >= start)
        and (end is None or txn.date <= end)
    ]


class DataService:
    """Queries the fixture store on behalf of an authenticated session."""

    def __init__(self, store: FixtureStore):
        self.store = store

    def _persona_data(self, session: SessionContext) -> PersonaData:
        data = self.store.get(session.persona)
        if data is None:
            # Only reachable if the store changed after the token was issued
            logger.error(
                "persona_missing_from_store",
                persona=session.persona,
                item_id=session.item_id,
            )
            raise InternalError()
        return data

    def get_accounts(self, session: SessionContext) -> list[Account]:
        """Return every account of the session's persona, in fixture order."""
        accounts = list(self._persona_data(session).accounts)
        logger.info("accounts_fetched", account_count=len(accounts))
        return accounts

    def get_transactions(
        self,
        session: SessionContext,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> list[Transaction]:
        """
        Return the persona's transactions, optionally bounded by date.

        Args:
            session: Verified identity of the caller
            start: Inclusive lower bound (YYYY-MM-DD); ignored if unparseable
            end: Inclusive upper bound (YYYY-MM-DD); ignored if unparseable

        Returns:
            Matching transactions in the fixture's original order
        """
        data = self._persona_data(session)

        start_date = self._resolve_bound("start", start)
        end_date = self._resolve_bound("end", end)

        transactions = filter_transactions(data.transactions, start_date, end_date)

        metrics.record_transactions_returned(len(transactions))
        logger.info(
            "transactions_fetched",
            start=start_date.isoformat() if start_date else None,
            end=end_date.isoformat() if end_date else None,
            total_count=len(data.transactions),
            returned_count=len(transactions),
        )
        return transactions

    def _resolve_bound(self, bound: str, raw: Optional[str]) -> Optional[date]:
        parsed = parse_date_bound(raw)
        if raw and parsed is None:
            metrics.record_ignored_date_filter(bound)
            logger.warning("date_filter_ignored", bound=bound, value=raw)
        return parsed
