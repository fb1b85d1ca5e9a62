from datetime import date
from enum import Enum
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from crud import app_config as crud_app_config
from database import get_db
from ledger import (
    InvalidDateRangeError,
    LedgerEngine,
    LedgerError,
    LedgerInfrastructureError,
    LedgerInvariantError,
    PartyNotFoundError,
    StatementExportError,
)
from ledger.export import statement_to_pdf, statement_to_xlsx
from ledger.formatter import to_printable, to_statement
from schemas.ledgers import PrintableStatement, Statement
from utils.auth_utils import require_group
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/ledgers", tags=["Ledgers"])
logger = logging.getLogger("ledgers")

LEDGER_GROUPS = ["staff", "admin", "superadmin"]


class ExportFormat(str, Enum):
    xlsx = "xlsx"
    pdf = "pdf"


def _build(db: Session, tenant_id: str, party_id: int, date_from: date, date_to: date):
    try:
        return LedgerEngine(db, tenant_id).build(party_id, date_from, date_to)
    except PartyNotFoundError as e:
        logger.warning(f"Ledger requested for unknown party: {e}")
        raise HTTPException(status_code=404, detail="Party not found")
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except LedgerInfrastructureError as e:
        logger.exception(f"Ledger fetch failed for tenant {tenant_id}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Failed to fetch ledger data: {e}")
    except LedgerInvariantError as e:
        logger.error(f"Ledger invariant violated for tenant {tenant_id}: {e} (source {e.kind} {e.source_id})")
        raise HTTPException(status_code=500, detail=str(e))
    except LedgerError as e:
        logger.exception(f"Ledger failed for tenant {tenant_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/party/{party_id}", response_model=Statement)
def get_party_ledger(
    party_id: int,
    date_from: date = Query(..., alias="from"),
    date_to: date = Query(..., alias="to"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(LEDGER_GROUPS)),
    tenant_id: str = Depends(get_tenant_id)
):
    """Chronological account statement of one party with running balance."""
    party, ledger = _build(db, tenant_id, party_id, date_from, date_to)
    return to_statement(party, date_from, date_to, ledger)


@router.get("/party/{party_id}/print", response_model=PrintableStatement)
def get_party_ledger_print(
    party_id: int,
    date_from: date = Query(..., alias="from"),
    date_to: date = Query(..., alias="to"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(LEDGER_GROUPS)),
    tenant_id: str = Depends(get_tenant_id)
):
    """Print-ready statement: every amount already formatted, DR/CR on balances."""
    party, ledger = _build(db, tenant_id, party_id, date_from, date_to)
    business = crud_app_config.get_statement_config(db, tenant_id)
    return to_printable(party, date_from, date_to, ledger, business)


@router.get("/party/{party_id}/export")
def export_party_ledger(
    party_id: int,
    date_from: date = Query(..., alias="from"),
    date_to: date = Query(..., alias="to"),
    format: ExportFormat = ExportFormat.xlsx,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(LEDGER_GROUPS)),
    tenant_id: str = Depends(get_tenant_id)
):
    """Download the statement as an Excel workbook or a PDF."""
    party, ledger = _build(db, tenant_id, party_id, date_from, date_to)
    business = crud_app_config.get_statement_config(db, tenant_id)
    printable = to_printable(party, date_from, date_to, ledger, business)

    filename = f"ledger_{party.id}_{date_from.isoformat()}_{date_to.isoformat()}.{format.value}"
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    if format == ExportFormat.pdf:
        try:
            document = statement_to_pdf(printable)
        except StatementExportError as e:
            logger.warning(f"PDF export failed for party {party.id}, tenant {tenant_id}: {e}")
            raise HTTPException(status_code=422, detail=e.message)
        return StreamingResponse(document, media_type="application/pdf", headers=headers)
    return StreamingResponse(
        statement_to_xlsx(printable),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )
