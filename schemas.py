"""
Domain Schemas for the ETIMAD dealership back office

Each Pydantic model below is one entity kind held by the in-memory store
(see store.py). Entities are frozen: the store replaces an entity with an
updated copy instead of mutating it in place.

Relations (logical, by id only, resolved at read time):
- lead.interested_in_id → car.id
- quotation.customer_id → customer.id ("MANUAL" when typed in by hand)
- receipt.quotation_id → quotation.id

The *Create / *Update models are request bodies validated at the API boundary.
"""
from __future__ import annotations

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# ---------- Enumerations ----------

CustomerStatus = Literal["Pending Verification", "Action Required", "Verified"]
CarStatus = Literal["Available", "Reserved", "Sold"]
LeadStatus = Literal["New", "Contacted", "Negotiation", "Closed Won", "Closed Lost"]
QuotationStatus = Literal["Draft", "Sent", "Accepted"]
PaymentMethod = Literal["Cash", "Card", "Cheque", "Bank Transfer"]
AddOn = Literal[
    "Free Service",
    "Change Tyres",
    "Registration",
    "Polishing",
    "Interior Deep Clean",
    "Exterior Clean",
]

PENDING = "Pending Verification"
ACTION_REQUIRED = "Action Required"
VERIFIED = "Verified"

ADD_ON_OPTIONS: List[str] = list(AddOn.__args__)

MANUAL_CUSTOMER_ID = "MANUAL"


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------- Customers & verification ----------

class QuestionnaireItem(Entity):
    question: str
    answer: str


class VerificationDetails(Entity):
    id_number: str
    expiry_date: str
    document_url: Optional[str] = None
    questionnaire: Optional[List[QuestionnaireItem]] = None


class Customer(Entity):
    id: str
    name: str = Field(..., description="Full name")
    email: str
    phone: str = ""
    status: CustomerStatus = PENDING
    notes: str = ""
    joined_date: datetime.date
    verification_details: Optional[VerificationDetails] = None


# ---------- Inventory & leads ----------

class Car(Entity):
    id: str
    make: str
    model: str
    year: int
    mileage: int = 0
    price: int = Field(0, description="Whole currency units")
    status: CarStatus = "Available"
    condition: str = "Excellent"
    description: str = ""
    image_url: str = Field("", description="URL or data: URI")
    vin: Optional[str] = None


class Lead(Entity):
    id: str
    name: str
    email: str
    phone: str
    status: LeadStatus = "New"
    interested_in_id: Optional[str] = None
    last_contact: datetime.date


# ---------- Documents ----------

class Quotation(Entity):
    """A frozen offer. ``monthly_payment`` is computed once at creation."""
    id: str
    customer_id: str
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    vehicle_make: str
    vehicle_model: str
    vehicle_year: int
    vin: Optional[str] = None
    price: int
    date: datetime.date
    status: QuotationStatus = "Draft"
    down_payment: Optional[int] = None
    tenure: Optional[int] = Field(None, description="Months")
    monthly_payment: Optional[float] = None
    add_ons: List[str] = []


class Receipt(Entity):
    id: str
    quotation_id: Optional[str] = None
    customer_name: str
    amount: float
    date: datetime.date
    payment_method: PaymentMethod = "Cash"
    vehicle_description: str


class RevenuePoint(Entity):
    month: str
    revenue: int


# ---------- Request bodies ----------

class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    notes: Optional[str] = None


class CarCreate(BaseModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int = 2024
    mileage: int = Field(0, ge=0)
    price: int = Field(0, ge=0)
    status: CarStatus = "Available"
    condition: str = "Excellent"
    description: str = ""
    image_url: Optional[str] = None
    vin: Optional[str] = None


class LeadUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    status: Optional[LeadStatus] = None
    interested_in_id: Optional[str] = None
    last_contact: Optional[datetime.date] = None


class QuotationCreate(BaseModel):
    customer_id: Optional[str] = None
    manual_customer: bool = False
    manual_name: Optional[str] = None
    manual_phone: Optional[str] = None
    manual_email: Optional[str] = None
    make: str
    model: str
    year: int = Field(default_factory=lambda: datetime.date.today().year)
    vin: Optional[str] = None
    price: int = Field(0, ge=0)
    down_payment: int = 0
    tenure: int = Field(12, ge=0)
    add_ons: List[AddOn] = []


class FinanceInputs(BaseModel):
    price: int = Field(0, ge=0)
    down_payment: int = 0
    tenure: int = Field(12, ge=0)


class ReceiptCreate(BaseModel):
    quotation_id: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    amount: float = 0
    vehicle_description: str = ""
    payment_method: PaymentMethod = "Cash"


class TermsUpdate(BaseModel):
    terms: str


class QuestionRequest(BaseModel):
    question: str


class PortalSubmission(BaseModel):
    id_number: str = Field(..., min_length=1)
    expiry_date: str = Field(..., min_length=1)
    answers: List[str] = []


class VerifyRequest(BaseModel):
    confirmed: bool = False


class DescriptionRequest(BaseModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int = 2020
    condition: str = "Excellent"
    mileage: int = 0


class ImageRequest(BaseModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int = 2024
    condition: str = "Excellent"


class ChatMessage(BaseModel):
    message: str
