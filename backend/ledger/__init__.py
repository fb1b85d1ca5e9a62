from ledger.engine import LedgerEngine, PartyDirectory, validate_date_range
from ledger.exceptions import (
    InvalidDateRangeError,
    LedgerError,
    LedgerInfrastructureError,
    LedgerInvariantError,
    PartyNotFoundError,
    StatementExportError,
)
from ledger.lines import LedgerLine, LineKind, PostedLine

__all__ = [
    'InvalidDateRangeError', 'LedgerEngine', 'LedgerError', 'LedgerInfrastructureError',
    'LedgerInvariantError', 'LedgerLine', 'LineKind', 'PartyDirectory', 'PartyNotFoundError',
    'PostedLine', 'StatementExportError', 'validate_date_range',
]
