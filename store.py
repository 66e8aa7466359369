"""
In-memory application state.

One AppState instance is created by the composition root (main.create_app)
and lives for the whole process. Collections are ordered newest-first.
Mutations never raise for an unknown id: they leave the collection as it
was and return False, the way an update with matched_count == 0 would.
"""
import logging
from typing import Any, Dict, List, Optional

import seed_data
from quotations import DEFAULT_TERMS
from schemas import ACTION_REQUIRED, VERIFIED, Car, Customer, Lead, Quotation, Receipt, VerificationDetails

logger = logging.getLogger(__name__)


def _find(items: List[Any], entity_id: Optional[str]):
    if entity_id is None:
        return None
    return next((item for item in items if item.id == entity_id), None)


class AppState:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.customers: List[Customer] = list(seed_data.MOCK_CUSTOMERS)
        self.cars: List[Car] = list(seed_data.MOCK_CARS)
        self.leads: List[Lead] = list(seed_data.MOCK_LEADS)
        self.quotations: List[Quotation] = list(seed_data.MOCK_QUOTATIONS)
        self.receipts: List[Receipt] = list(seed_data.MOCK_RECEIPTS)
        self.revenue = list(seed_data.REVENUE_DATA)
        # Printed on every quotation at render time, never copied onto one
        self.quotation_terms: str = DEFAULT_TERMS
        # customer id -> verification.VerificationInvite
        self.invites: Dict[str, Any] = {}

    # ---------- Adds (prepend) ----------

    def add_customer(self, customer: Customer) -> Customer:
        self.customers = [customer, *self.customers]
        logger.info("Added customer %s (%s)", customer.id, customer.name)
        return customer

    def add_car(self, car: Car) -> Car:
        self.cars = [car, *self.cars]
        logger.info("Added car %s: %s %s %s", car.id, car.year, car.make, car.model)
        return car

    def add_quotation(self, quotation: Quotation) -> Quotation:
        self.quotations = [quotation, *self.quotations]
        logger.info("Added quotation %s for %s", quotation.id, quotation.customer_name)
        return quotation

    def add_receipt(self, receipt: Receipt) -> Receipt:
        self.receipts = [receipt, *self.receipts]
        logger.info("Added receipt %s for %s", receipt.id, receipt.customer_name)
        return receipt

    # ---------- Updates ----------

    def _replace_customer(self, customer_id: str, **changes) -> bool:
        matched = False
        updated = []
        for customer in self.customers:
            if customer.id == customer_id:
                customer = customer.model_copy(update=changes)
                matched = True
            updated.append(customer)
        self.customers = updated
        if not matched:
            logger.debug("No customer with id %s, nothing updated", customer_id)
        return matched

    def submit_documents(self, customer_id: str, details: VerificationDetails) -> bool:
        """Attach submitted verification details and move the customer to Action Required."""
        matched = self._replace_customer(customer_id, status=ACTION_REQUIRED, verification_details=details)
        if matched:
            logger.info("Customer %s submitted verification documents", customer_id)
        return matched

    def verify_customer(self, customer_id: str) -> bool:
        """Mark a customer Verified. Deliberately accepts any current status."""
        matched = self._replace_customer(customer_id, status=VERIFIED)
        if matched:
            logger.info("Customer %s verified", customer_id)
        return matched

    def update_lead(self, lead_id: str, updates: Dict[str, Any]) -> bool:
        """Merge ``updates`` into a lead. The merged lead is validated before it replaces the old one."""
        matched = False
        leads = []
        for lead in self.leads:
            if lead.id == lead_id:
                lead = Lead.model_validate({**lead.model_dump(), **updates})
                matched = True
            leads.append(lead)
        self.leads = leads
        if matched:
            logger.info("Updated lead %s: %s", lead_id, sorted(updates))
        else:
            logger.debug("No lead with id %s, nothing updated", lead_id)
        return matched

    # ---------- Lookups ----------

    def get_customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        return _find(self.customers, customer_id)

    def get_car(self, car_id: Optional[str]) -> Optional[Car]:
        return _find(self.cars, car_id)

    def get_lead(self, lead_id: Optional[str]) -> Optional[Lead]:
        return _find(self.leads, lead_id)

    def get_quotation(self, quotation_id: Optional[str]) -> Optional[Quotation]:
        return _find(self.quotations, quotation_id)

    def get_receipt(self, receipt_id: Optional[str]) -> Optional[Receipt]:
        return _find(self.receipts, receipt_id)

    def search_customers(self, term: Optional[str] = None) -> List[Customer]:
        if not term:
            return list(self.customers)
        needle = term.lower()
        return [c for c in self.customers if needle in c.name.lower() or term in c.phone]

    def search_cars(self, term: Optional[str] = None, make: Optional[str] = None) -> List[Car]:
        needle = (term or "").lower()
        res = []
        for car in self.cars:
            if needle and needle not in car.make.lower() and needle not in car.model.lower():
                continue
            if make and make != "All" and car.make != make:
                continue
            res.append(car)
        return res

    def car_makes(self) -> List[str]:
        makes: List[str] = []
        for car in self.cars:
            if car.make not in makes:
                makes.append(car.make)
        return ["All", *makes]

    def car_label(self, car_id: Optional[str]) -> str:
        if not car_id:
            return "General Inquiry"
        car = self.get_car(car_id)
        return f"{car.year} {car.make} {car.model}" if car else "Unknown Vehicle"
