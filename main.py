import logging
import time
import uuid
from datetime import date
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

import config
import documents
import quotations as quotation_engine
import verification
from genai_service import MISSING_KEY_MESSAGE, AssistantSession, DraftBoard, GenerativeService
from schemas import (
    ADD_ON_OPTIONS, VERIFIED, Car, CarCreate, ChatMessage, Customer, CustomerCreate, DescriptionRequest,
    FinanceInputs, ImageRequest, LeadUpdate, PortalSubmission, QuestionRequest, QuotationCreate, Receipt,
    ReceiptCreate, TermsUpdate, VerifyRequest,
)
from store import AppState

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="ETIMAD Dealership API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-lifetime state, owned here and handed to routes through dependencies
app.state.store = AppState()
app.state.genai = GenerativeService()
app.state.drafts = DraftBoard()
app.state.assistant = AssistantSession()

NAV_VIEWS = [
    {"name": "Dashboard", "path": "/", "admin_chrome": True},
    {"name": "Inventory", "path": "/inventory", "admin_chrome": True},
    {"name": "Customers", "path": "/customers", "admin_chrome": True},
    {"name": "Quotations", "path": "/quotations", "admin_chrome": True},
    {"name": "Receipts", "path": "/receipts", "admin_chrome": True},
    {"name": "Leads", "path": "/leads", "admin_chrome": True},
    {"name": "Shop", "path": "/shop", "admin_chrome": False},
]

# The add-car form has one description and one image draft
CAR_DESCRIPTION_SLOT = "car:description"
CAR_IMAGE_SLOT = "car:image"


# ---------- Dependencies ----------

def get_store(request: Request) -> AppState:
    return request.app.state.store


def get_genai(request: Request) -> GenerativeService:
    return request.app.state.genai


def get_drafts(request: Request) -> DraftBoard:
    return request.app.state.drafts


def get_assistant(request: Request) -> AssistantSession:
    return request.app.state.assistant


def new_id() -> str:
    return str(uuid.uuid4())


# ---------- App ----------

@app.get("/")
def root():
    return {"message": "ETIMAD Dealership API running"}


@app.get("/api/navigation")
def navigation():
    return NAV_VIEWS


@app.get("/api/config")
def app_config(genai: GenerativeService = Depends(get_genai)):
    return {
        "ai_enabled": genai.is_configured,
        "message": None if genai.is_configured else MISSING_KEY_MESSAGE,
        "currency": config.CURRENCY,
        "dealer": config.DEALER_LEGAL_NAME,
    }


# ---------- Dashboard ----------

@app.get("/api/dashboard")
def dashboard(store: AppState = Depends(get_store)):
    return {
        "total_revenue": sum(r.amount for r in store.receipts),
        "active_quotations": sum(1 for q in store.quotations if q.status in ("Draft", "Sent")),
        "total_customers": len(store.customers),
        "verified_customers": sum(1 for c in store.customers if c.status == VERIFIED),
        "revenue": store.revenue,
    }


# ---------- Inventory ----------

@app.get("/api/cars")
def list_cars(q: Optional[str] = None, store: AppState = Depends(get_store)):
    return store.search_cars(q)


@app.post("/api/cars")
def create_car(payload: CarCreate, store: AppState = Depends(get_store)):
    data = payload.model_dump()
    data["image_url"] = payload.image_url or f"https://picsum.photos/seed/{int(time.time() * 1000)}/800/600"
    data["vin"] = payload.vin or None
    return store.add_car(Car(id=new_id(), **data))


@app.post("/api/cars/generate-description")
def generate_description(payload: DescriptionRequest, genai: GenerativeService = Depends(get_genai),
                         drafts: DraftBoard = Depends(get_drafts)):
    features = f"{payload.condition} condition, {payload.mileage} miles"
    ticket = drafts.begin(CAR_DESCRIPTION_SLOT)
    description = genai.generate_car_description(payload.make, payload.model, payload.year, features)
    applied = drafts.apply(CAR_DESCRIPTION_SLOT, ticket, description)
    return {"description": description, "applied": applied}


@app.post("/api/cars/generate-image")
def generate_image(payload: ImageRequest, genai: GenerativeService = Depends(get_genai),
                   drafts: DraftBoard = Depends(get_drafts)):
    prompt = f"{payload.year} {payload.make} {payload.model}, {payload.condition}, studio lighting"
    ticket = drafts.begin(CAR_IMAGE_SLOT)
    image_url = genai.generate_image(prompt)
    applied = drafts.apply(CAR_IMAGE_SLOT, ticket, image_url)
    return {"image_url": image_url, "applied": applied}


@app.get("/api/cars/drafts")
def get_car_drafts(drafts: DraftBoard = Depends(get_drafts)):
    return {"description": drafts.get(CAR_DESCRIPTION_SLOT), "image_url": drafts.get(CAR_IMAGE_SLOT)}


# ---------- Customers ----------

@app.get("/api/customers")
def list_customers(q: Optional[str] = None, store: AppState = Depends(get_store)):
    return store.search_customers(q)


@app.post("/api/customers")
def create_customer(payload: CustomerCreate, store: AppState = Depends(get_store)):
    customer = Customer(
        id=new_id(),
        name=payload.name,
        email=payload.email,
        phone=payload.phone or "",
        notes=payload.notes or "",
        joined_date=date.today(),
    )
    return store.add_customer(customer)


@app.post("/api/customers/{customer_id}/mail")
def mail_customer(customer_id: str, store: AppState = Depends(get_store)):
    customer = store.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    logger.info("Confirmation email queued for %s", customer.email)
    return {"message": f"Confirmation email sent to {customer.email}"}


# ---------- Verification ----------

def _invite_or_404(store: AppState, customer_id: str) -> verification.VerificationInvite:
    invite = verification.get_invite(store, customer_id)
    if invite is None:
        raise HTTPException(status_code=404, detail="No verification in progress for this customer")
    return invite


@app.post("/api/customers/{customer_id}/verification")
def open_verification(customer_id: str, store: AppState = Depends(get_store)):
    invite = verification.open_invite(store, customer_id)
    if invite is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return invite.to_dict()


@app.get("/api/customers/{customer_id}/verification")
def get_verification(customer_id: str, store: AppState = Depends(get_store)):
    return _invite_or_404(store, customer_id).to_dict()


@app.post("/api/customers/{customer_id}/verification/questions")
def add_question(customer_id: str, payload: QuestionRequest, store: AppState = Depends(get_store)):
    invite = _invite_or_404(store, customer_id)
    try:
        invite.questions.add(payload.question)
    except verification.QuestionSetFrozen as e:
        raise HTTPException(status_code=409, detail=str(e))
    return invite.to_dict()


@app.delete("/api/customers/{customer_id}/verification/questions/{index}")
def remove_question(customer_id: str, index: int, store: AppState = Depends(get_store)):
    invite = _invite_or_404(store, customer_id)
    try:
        invite.questions.remove(index)
    except verification.QuestionSetFrozen as e:
        raise HTTPException(status_code=409, detail=str(e))
    return invite.to_dict()


@app.post("/api/customers/{customer_id}/verification/link")
def generate_link(customer_id: str, store: AppState = Depends(get_store)):
    invite = _invite_or_404(store, customer_id)
    invite.generate_link(config.VERIFY_BASE_URL)
    return invite.to_dict()


@app.get("/verify/{customer_id}")
def portal_form(customer_id: str, token: Optional[str] = None, store: AppState = Depends(get_store)):
    try:
        invite = verification.check_token(verification.get_invite(store, customer_id), token)
    except verification.InvalidToken as e:
        raise HTTPException(status_code=403, detail=str(e))
    customer = store.get_customer(customer_id)
    return {
        "customer_name": customer.name if customer else None,
        "questions": invite.questions.questions,
    }


@app.post("/verify/{customer_id}")
def portal_submit(customer_id: str, payload: PortalSubmission, token: Optional[str] = None,
                  store: AppState = Depends(get_store)):
    try:
        updated = verification.submit_portal(
            store, customer_id, token, payload.id_number, payload.expiry_date, payload.answers
        )
    except verification.InvalidToken as e:
        raise HTTPException(status_code=403, detail=str(e))
    except verification.AnswerCountMismatch as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"updated": updated}


@app.get("/api/customers/{customer_id}/review")
def review_customer(customer_id: str, store: AppState = Depends(get_store)):
    customer = verification.review(store, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@app.post("/api/customers/{customer_id}/verify")
def verify_customer(customer_id: str, payload: VerifyRequest, store: AppState = Depends(get_store)):
    if not payload.confirmed:
        raise HTTPException(status_code=400, detail="Verification must be confirmed")
    return {"updated": verification.approve(store, customer_id)}


@app.post("/api/customers/{customer_id}/reject")
def reject_customer(customer_id: str, store: AppState = Depends(get_store)):
    customer = verification.reject(store, customer_id)
    return {"updated": False, "status": customer.status if customer else None}


# ---------- Quotations ----------

@app.get("/api/quotations")
def list_quotations(store: AppState = Depends(get_store)):
    return store.quotations


@app.get("/api/quotations/add-ons")
def list_add_ons():
    return ADD_ON_OPTIONS


@app.post("/api/quotations/preview")
def preview_quotation(inputs: FinanceInputs):
    return quotation_engine.finance_summary(inputs.price, inputs.down_payment, inputs.tenure)


@app.post("/api/quotations")
def create_quotation(payload: QuotationCreate, store: AppState = Depends(get_store)):
    quotation = quotation_engine.create_quotation(store, payload)
    if quotation is None:
        raise HTTPException(status_code=400, detail="A known customer or a manual customer name is required")
    return quotation


@app.get("/api/quotations/{quotation_id}")
def get_quotation(quotation_id: str, store: AppState = Depends(get_store)):
    quotation = store.get_quotation(quotation_id)
    if not quotation:
        raise HTTPException(status_code=404, detail="Quotation not found")
    return quotation


@app.get("/quotations/{quotation_id}/print", response_class=HTMLResponse)
def print_quotation(quotation_id: str, store: AppState = Depends(get_store)):
    quotation = store.get_quotation(quotation_id)
    if not quotation:
        raise HTTPException(status_code=404, detail="Not found")
    customer = store.get_customer(quotation.customer_id)
    return HTMLResponse(content=documents.render_quotation(quotation, store.quotation_terms, customer))


@app.get("/api/quotation-terms")
def get_terms(store: AppState = Depends(get_store)):
    return {"terms": store.quotation_terms}


@app.put("/api/quotation-terms")
def update_terms(payload: TermsUpdate, store: AppState = Depends(get_store)):
    store.quotation_terms = payload.terms
    logger.info("Quotation terms updated")
    return {"terms": store.quotation_terms}


# ---------- Receipts ----------

@app.get("/api/receipts")
def list_receipts(store: AppState = Depends(get_store)):
    return store.receipts


@app.post("/api/receipts")
def create_receipt(payload: ReceiptCreate, store: AppState = Depends(get_store)):
    receipt = Receipt(id=new_id(), date=date.today(), **payload.model_dump())
    return store.add_receipt(receipt)


@app.get("/receipts/{receipt_id}/print", response_class=HTMLResponse)
def print_receipt(receipt_id: str, store: AppState = Depends(get_store)):
    receipt = store.get_receipt(receipt_id)
    if not receipt:
        raise HTTPException(status_code=404, detail="Not found")
    return HTMLResponse(content=documents.render_receipt(receipt))


# ---------- Leads ----------

@app.get("/api/leads")
def list_leads(store: AppState = Depends(get_store)):
    return [{**lead.model_dump(mode="json"), "interested_in": store.car_label(lead.interested_in_id)}
            for lead in store.leads]


@app.patch("/api/leads/{lead_id}")
def update_lead(lead_id: str, payload: LeadUpdate, store: AppState = Depends(get_store)):
    update_doc = {k: v for k, v in payload.model_dump(exclude_unset=True).items()
                  if v is not None or k == "interested_in_id"}
    if not update_doc:
        return {"updated": False}
    return {"updated": store.update_lead(lead_id, update_doc)}


@app.post("/api/leads/{lead_id}/draft-email")
def draft_lead_email(lead_id: str, store: AppState = Depends(get_store),
                     genai: GenerativeService = Depends(get_genai), drafts: DraftBoard = Depends(get_drafts)):
    lead = store.get_lead(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    car = store.car_label(lead.interested_in_id)
    slot = f"lead:{lead_id}"
    ticket = drafts.begin(slot)
    body = genai.generate_lead_email(lead.name, car, lead.status)
    draft = {"subject": f"Regarding your interest in {car}", "body": body}
    applied = drafts.apply(slot, ticket, draft)
    return {**draft, "applied": applied}


@app.get("/api/leads/{lead_id}/draft-email")
def get_lead_email(lead_id: str, drafts: DraftBoard = Depends(get_drafts)):
    draft = drafts.get(f"lead:{lead_id}")
    if draft is None:
        raise HTTPException(status_code=404, detail="No draft for this lead")
    return draft


# ---------- Shop ----------

@app.get("/api/shop")
def shop_listing(q: Optional[str] = None, make: Optional[str] = None, store: AppState = Depends(get_store)):
    cars = store.search_cars(q, make)
    return {
        "makes": store.car_makes(),
        "cars": [{**car.model_dump(mode="json"),
                  "whatsapp_url": documents.whatsapp_link(f"{car.year} {car.make} {car.model}")}
                 for car in cars],
    }


@app.get("/shop", response_class=HTMLResponse)
def shop_page(q: Optional[str] = None, make: Optional[str] = None, store: AppState = Depends(get_store)):
    cars = store.search_cars(q, make)
    return HTMLResponse(content=documents.render_shop(cars, store.car_makes(), make or "All", q or ""))


# ---------- Assistant ----------

@app.get("/api/assistant")
def assistant_history(assistant: AssistantSession = Depends(get_assistant),
                      genai: GenerativeService = Depends(get_genai)):
    return {"enabled": genai.is_configured, "messages": assistant.messages}


@app.post("/api/assistant/messages")
def assistant_message(payload: ChatMessage, assistant: AssistantSession = Depends(get_assistant),
                      genai: GenerativeService = Depends(get_genai)):
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")
    if not genai.is_configured:
        raise HTTPException(status_code=400, detail=MISSING_KEY_MESSAGE)
    return {"reply": assistant.send(genai, payload.message)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
