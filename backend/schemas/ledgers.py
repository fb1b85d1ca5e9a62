from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional

# Party statement (JSON for the UI table)
class DateRange(BaseModel):
    date_from: date
    date_to: date

class StatementEntry(BaseModel):
    date: date
    type: str
    kind: str
    reference_number: Optional[str] = None
    particulars: str
    debit_amount: Decimal
    credit_amount: Decimal
    running_balance: Decimal
    balance_type: str  # DR / CR
    source_id: int

class StatementTotals(BaseModel):
    debit: Decimal
    credit: Decimal
    closing_balance: Decimal
    closing_balance_type: str

class Statement(BaseModel):
    party_id: int
    party_name: str
    date_range: DateRange
    opening_balance: Decimal
    opening_balance_type: str
    entries: List[StatementEntry]
    totals: StatementTotals

# Printable statement (every value already rendered as text)
class PrintableRow(BaseModel):
    date: str
    type: str
    reference_number: str
    particulars: str
    debit: str
    credit: str
    balance: str

class PrintableTotals(BaseModel):
    debit: str
    credit: str
    closing_balance: str

class PrintableStatement(BaseModel):
    title: str
    business_name: str
    business_address: str
    party_name: str
    party_address: Optional[str] = None
    pan_number: Optional[str] = None
    date_range_label: str
    currency_label: str
    opening_balance: str
    rows: List[PrintableRow]
    totals: PrintableTotals
    closing_balance_in_words: str
