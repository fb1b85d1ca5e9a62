"""
Party statement engine.

Flow: resolve the party -> check the range -> every adapter reads its lines
for the range (and the lines before it, for the opening balance) -> merge ->
accumulate. All reads finish before the running balance pass starts. An
unknown party wins over a bad range, so callers see 404 before 400.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.accumulator import AccumulatedLedger, accumulate, net_effect
from ledger.adapters import TransactionAdapter, default_adapters
from ledger.exceptions import InvalidDateRangeError, LedgerInfrastructureError, PartyNotFoundError
from ledger.merge import merge_lines
from models.parties import Party
from utils.formatting import to_money

logger = logging.getLogger(__name__)


def validate_date_range(date_from: Optional[date], date_to: Optional[date], party_id: Optional[int] = None):
    if date_from is None or date_to is None:
        raise InvalidDateRangeError(
            "Both 'from' and 'to' dates are required",
            party_id=party_id, date_from=date_from, date_to=date_to, stage="validate",
        )
    if date_from > date_to:
        raise InvalidDateRangeError(
            "Start date cannot be later than end date.",
            party_id=party_id, date_from=date_from, date_to=date_to, stage="validate",
        )


class PartyDirectory:
    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def get(self, party_id: int) -> Party:
        try:
            party = self.db.query(Party).filter(
                Party.id == party_id,
                Party.tenant_id == self.tenant_id,
                Party.deleted_at.is_(None),
            ).first()
        except SQLAlchemyError as e:
            raise LedgerInfrastructureError("Failed to read party", party_id=party_id, stage="party") from e
        if party is None:
            raise PartyNotFoundError("Party not found", party_id=party_id, stage="party")
        return party


class LedgerEngine:
    """Builds one party's statement. Holds no state beyond its injected collaborators."""

    def __init__(
        self,
        db: Session,
        tenant_id: str,
        adapters: Optional[Sequence[TransactionAdapter]] = None,
        directory: Optional[PartyDirectory] = None,
    ):
        self.adapters = list(adapters) if adapters is not None else default_adapters(db, tenant_id)
        self.directory = directory or PartyDirectory(db, tenant_id)

    def opening_balance(self, party: Party, date_from: date):
        """Stored opening balance rolled forward through every line before the range."""
        prior = []
        for adapter in self.adapters:
            prior.extend(adapter.fetch_before(party.id, date_from))
        return to_money(party.opening_balance) + net_effect(prior)

    def build(self, party_id: int, date_from: date, date_to: date) -> Tuple[Party, AccumulatedLedger]:
        party = self.directory.get(party_id)
        validate_date_range(date_from, date_to, party_id)

        batches: List = [adapter.fetch(party.id, date_from, date_to) for adapter in self.adapters]
        opening = self.opening_balance(party, date_from)

        lines = merge_lines(*batches)
        ledger = accumulate(lines, opening)
        logger.info(
            f"Built statement for party {party.id} ({date_from}..{date_to}): "
            f"{len(ledger.lines)} lines, closing balance {ledger.closing_balance}"
        )
        return party, ledger
