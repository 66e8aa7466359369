"""
Runtime configuration for the ETIMAD back-office API.

Everything is read from the environment once, at import time.
"""
import os

# Generative API (Gemini). An empty key disables every AI affordance.
GEMINI_API_KEY = os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY", "")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
GEMINI_TEXT_MODEL = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

# Verification links are built as <base>/verify/<customer_id>?token=<token>
VERIFY_BASE_URL = os.getenv("VERIFY_BASE_URL", "https://etimad.crm").rstrip("/")

# Dealer identity printed on quotations, receipts and the storefront
DEALER_NAME = os.getenv("DEALER_NAME", "ETIMAD")
DEALER_LEGAL_NAME = os.getenv("DEALER_LEGAL_NAME", "ETIMAD USED CAR LEASING L.L.C")
DEALER_TAGLINE = os.getenv("DEALER_TAGLINE", "Used Car Leasing L.L.C")
DEALER_ADDRESS = os.getenv("DEALER_ADDRESS", "Dubai, United Arab Emirates")
DEALER_SHOWROOM = os.getenv("DEALER_SHOWROOM", "Showroom 12, Sheikh Zayed Road, Dubai")
DEALER_PHONE = os.getenv("DEALER_PHONE", "+971 4 123 4567")
DEALER_WHATSAPP = os.getenv("DEALER_WHATSAPP", "+971 50 123 4567")
CURRENCY = os.getenv("CURRENCY", "AED")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", 8000))
