from datetime import date
from typing import Optional


class LedgerError(Exception):
    """Base class for statement failures.

    Carries enough context (party, range, stage) for the caller to act on it.
    """

    def __init__(
        self,
        message: str,
        party_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        stage: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.party_id = party_id
        self.date_from = date_from
        self.date_to = date_to
        self.stage = stage

    def __str__(self):
        context = []
        if self.party_id is not None:
            context.append(f"party={self.party_id}")
        if self.date_from is not None or self.date_to is not None:
            context.append(f"range={self.date_from}..{self.date_to}")
        if self.stage:
            context.append(f"stage={self.stage}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class PartyNotFoundError(LedgerError):
    pass


class InvalidDateRangeError(LedgerError):
    pass


class LedgerInfrastructureError(LedgerError):
    """The persistence layer failed; never retried here."""
    pass


class LedgerInvariantError(LedgerError):
    def __init__(self, message: str, source_id: Optional[int] = None, kind: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source_id = source_id
        self.kind = kind


class StatementExportError(LedgerError):
    """The statement was built but could not be rendered in the requested format."""
    pass
