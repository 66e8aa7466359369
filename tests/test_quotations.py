import pytest
from pydantic import ValidationError

from quotations import (
    DEFAULT_TERMS, build_quotation, compute_balance, compute_monthly_payment, create_quotation, finance_summary,
    normalize_add_ons, quotation_reference, round_half_up,
)
from schemas import MANUAL_CUSTOMER_ID, QuotationCreate


@pytest.mark.parametrize("price,down_payment,tenure", [
    (310000, 50000, 24),
    (55000, 0, 12),
    (100000, 99999, 36),
    (1, 0, 7),
])
def test_monthly_payment_is_balance_over_tenure(price, down_payment, tenure):
    expected = max(0, price - down_payment) / tenure
    assert compute_monthly_payment(price, down_payment, tenure) == pytest.approx(expected)


@pytest.mark.parametrize("price,down_payment", [(310000, 50000), (0, 0), (100000, 150000)])
def test_zero_tenure_means_no_financing(price, down_payment):
    assert compute_monthly_payment(price, down_payment, 0) == 0
    assert compute_monthly_payment(price, down_payment, None) == 0


@pytest.mark.parametrize("price,down_payment,expected", [
    (310000, 50000, 260000),
    (100000, 150000, 0),
    (100000, 100000, 0),
    (100000, -5000, 105000),
    (100000, None, 100000),
])
def test_balance_never_negative(price, down_payment, expected):
    assert compute_balance(price, down_payment) == expected


def test_land_cruiser_scenario():
    summary = finance_summary(310000, 50000, 24)
    assert summary["balance"] == 260000
    assert summary["monthly_payment"] == pytest.approx(10833.3333, rel=1e-6)
    assert summary["monthly_payment_rounded"] == 10833


def test_over_payment_scenario():
    summary = finance_summary(100000, 150000, 12)
    assert summary["balance"] == 0
    assert summary["monthly_payment"] == 0


def test_round_half_up_matches_display_rounding():
    assert round_half_up(10833.5) == 10834
    assert round_half_up(2.5) == 3
    assert round_half_up(10833.33) == 10833
    assert round_half_up(None) == 0


def test_reference_is_first_eight_characters_uppercased():
    assert quotation_reference("3f2a9c1d-aaaa-bbbb") == "3F2A9C1D"
    assert quotation_reference("q1") == "Q1"


def test_add_ons_deduplicated_in_first_seen_order():
    assert normalize_add_ons(["Polishing", "Free Service", "Polishing", "Car Wash"]) == ["Polishing", "Free Service"]


def test_build_from_customer_snapshots_contact_and_freezes_payment(store):
    payload = QuotationCreate(
        customer_id="cust2", make="Toyota", model="Land Cruiser", year=2022,
        price=310000, down_payment=50000, tenure=24, add_ons=["Registration", "Registration"],
    )
    quotation = build_quotation(store, payload)

    assert quotation.customer_id == "cust2"
    assert quotation.customer_name == "John Smith"
    assert quotation.customer_phone == "+971 55 987 6543"
    assert quotation.customer_email == "john.smith@example.com"
    assert quotation.status == "Draft"
    assert quotation.add_ons == ["Registration"]
    assert quotation.monthly_payment == pytest.approx(260000 / 24)
    with pytest.raises(ValidationError):
        quotation.monthly_payment = 1


def test_build_from_manual_contact(store):
    payload = QuotationCreate(
        manual_customer=True, manual_name="Walk-in Buyer", manual_phone="+971 50 000 0000",
        make="Audi", model="RS Q8", price=595000, down_payment=0, tenure=0,
    )
    quotation = build_quotation(store, payload)

    assert quotation.customer_id == MANUAL_CUSTOMER_ID
    assert quotation.customer_name == "Walk-in Buyer"
    assert quotation.customer_email == ""
    assert quotation.monthly_payment == 0


def test_build_aborts_without_a_customer(store):
    assert build_quotation(store, QuotationCreate(customer_id="nope", make="A", model="B")) is None
    assert build_quotation(store, QuotationCreate(manual_customer=True, make="A", model="B")) is None


def test_create_prepends_to_store(store):
    before = len(store.quotations)
    quotation = create_quotation(store, QuotationCreate(customer_id="cust1", make="BMW", model="X5", price=385000))

    assert len(store.quotations) == before + 1
    assert store.quotations[0] is quotation
    assert create_quotation(store, QuotationCreate(customer_id="ghost", make="BMW", model="X5")) is None
    assert len(store.quotations) == before + 1


def test_default_terms_have_four_lines():
    assert len(DEFAULT_TERMS.splitlines()) == 4
