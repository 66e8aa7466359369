"""
Quotation financial engine.

A quotation freezes the payment plan offered on the day it is created:

    balance         = max(0, price - down_payment)
    monthly_payment = balance / tenure   (0 when tenure is 0, i.e. no financing)

monthly_payment is computed here once and stored on the Quotation. Nothing
recomputes it on read. Terms and conditions are process-wide and are only
interpolated when a quotation is rendered (see documents.py).
"""
import logging
import uuid
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from schemas import ADD_ON_OPTIONS, MANUAL_CUSTOMER_ID, Quotation, QuotationCreate

logger = logging.getLogger(__name__)

DEFAULT_TERMS = (
    "All prices are in UAE Dirhams (AED).\n"
    "This quotation is valid for 7 days from the date of issue.\n"
    "Vehicle delivery is subject to clearance of full payment.\n"
    "Registration and insurance fees are not included unless specified."
)

VALIDITY_DAYS = 7


def compute_balance(price: float, down_payment: Optional[float] = None) -> float:
    return max(0, price - (down_payment or 0))


def compute_monthly_payment(price: float, down_payment: Optional[float] = None, tenure: Optional[int] = None) -> float:
    if not tenure or tenure <= 0:
        return 0
    return compute_balance(price, down_payment) / tenure


def round_half_up(value: Optional[float]) -> int:
    """Round to whole currency units, halves away from zero (10833.5 -> 10834)."""
    return int(Decimal(str(value or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def quotation_reference(quotation_id: str) -> str:
    return quotation_id[:8].upper()


def normalize_add_ons(add_ons: Iterable[str]) -> List[str]:
    """Keep known options only, first occurrence wins."""
    res: List[str] = []
    for add_on in add_ons:
        if add_on in ADD_ON_OPTIONS and add_on not in res:
            res.append(add_on)
    return res


def finance_summary(price: int, down_payment: int, tenure: int) -> dict:
    monthly = compute_monthly_payment(price, down_payment, tenure)
    return {
        "price": price,
        "down_payment": down_payment,
        "tenure": tenure,
        "balance": compute_balance(price, down_payment),
        "monthly_payment": monthly,
        "monthly_payment_rounded": round_half_up(monthly),
    }


def build_quotation(state, payload: QuotationCreate) -> Optional[Quotation]:
    """
    Assemble a Draft quotation from the form payload.

    The contact block is copied either from the selected customer or from the
    manual fields. Returns None (nothing created) when a manual entry has no
    name or the selected customer does not exist.
    """
    if payload.manual_customer:
        if not payload.manual_name:
            logger.debug("Manual quotation without a customer name, aborted")
            return None
        customer_id = MANUAL_CUSTOMER_ID
        name, phone, email = payload.manual_name, payload.manual_phone or "", payload.manual_email or ""
    else:
        customer = state.get_customer(payload.customer_id)
        if customer is None:
            logger.debug("Quotation for unknown customer %s, aborted", payload.customer_id)
            return None
        customer_id = customer.id
        name, phone, email = customer.name, customer.phone, customer.email

    return Quotation(
        id=str(uuid.uuid4()),
        customer_id=customer_id,
        customer_name=name,
        customer_phone=phone,
        customer_email=email,
        vehicle_make=payload.make,
        vehicle_model=payload.model,
        vehicle_year=payload.year,
        vin=payload.vin or None,
        price=payload.price,
        date=date.today(),
        status="Draft",
        down_payment=payload.down_payment,
        tenure=payload.tenure,
        monthly_payment=compute_monthly_payment(payload.price, payload.down_payment, payload.tenure),
        add_ons=normalize_add_ons(payload.add_ons),
    )


def create_quotation(state, payload: QuotationCreate) -> Optional[Quotation]:
    quotation = build_quotation(state, payload)
    if quotation is not None:
        state.add_quotation(quotation)
    return quotation
