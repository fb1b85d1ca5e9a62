from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional
import os

from sqlalchemy.orm import Session, selectinload

from models.sales import Sale
from models.sale_items import SaleItem

VAT_RATE = Decimal(os.getenv("VAT_RATE", "0.13"))
TWO_PLACES = Decimal("0.01")


def _round(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def rate_excluding_vat(mrp: Decimal, vat_rate: Decimal = VAT_RATE) -> Decimal:
    """Product MRP is VAT inclusive; invoices are priced without VAT."""
    return _round(Decimal(mrp) / (1 + vat_rate))


def calculate_totals(
    item_amounts: List[Decimal],
    direct_entry_amount: Optional[Decimal],
    discount_percentage: Decimal,
    vat_rate: Decimal = VAT_RATE,
) -> Dict[str, Decimal]:
    if item_amounts:
        sub_total = sum(item_amounts, Decimal("0"))
    elif direct_entry_amount:
        sub_total = Decimal(direct_entry_amount) / (1 + vat_rate)
    else:
        sub_total = Decimal("0")
    sub_total = _round(sub_total)

    discount_amount = _round(sub_total * Decimal(discount_percentage) / 100)
    taxable_amount = _round(sub_total - discount_amount)
    vat_amount = _round(taxable_amount * vat_rate)
    grand_total = _round(taxable_amount + vat_amount)

    return {
        "sub_total": sub_total,
        "discount_amount": discount_amount,
        "taxable_amount": taxable_amount,
        "vat_amount": vat_amount,
        "grand_total": grand_total,
    }


def build_item(product, quantity: Decimal, tenant_id: str) -> SaleItem:
    rate = rate_excluding_vat(product.mrp)
    return SaleItem(
        product_id=product.id,
        name=product.name,
        quantity=quantity,
        rate=rate,
        amount=_round(rate * Decimal(quantity)),
        tenant_id=tenant_id,
    )


def apply_totals(db_sale: Sale, items: List[SaleItem]):
    """Recompute and store totals from the sale's current items or direct entry."""
    totals = calculate_totals(
        [item.amount for item in items],
        db_sale.direct_entry_amount,
        db_sale.discount_percentage or Decimal("0"),
    )
    for key, value in totals.items():
        setattr(db_sale, key, value)


def get_sale(db: Session, sale_id: int, tenant_id: str) -> Optional[Sale]:
    return (
        db.query(Sale)
        .filter(Sale.id == sale_id, Sale.tenant_id == tenant_id)
        .options(selectinload(Sale.items))
        .first()
    )
