"""
Printable documents and the public storefront page.

Quotation and receipt pages keep everything that should reach paper inside
#printable-area; the @media print rules hide the rest of the page (toolbar,
buttons) when the browser prints.
"""
from html import escape
from typing import Iterable, List, Optional
from urllib.parse import quote

import config
from quotations import VALIDITY_DAYS, compute_balance, quotation_reference, round_half_up
from schemas import Car, Customer, Quotation, Receipt

PRINT_CSS = """
body{font-family:Georgia,serif;margin:0;background:#f5f5f4;color:#1c1917}
.toolbar{display:flex;justify-content:space-between;padding:1rem 2rem;background:#1c1917;color:#fff;font-family:sans-serif}
.toolbar button{background:#7f1d1d;color:#fff;border:0;padding:.5rem 1rem;cursor:pointer}
#printable-area{background:#fff;max-width:800px;margin:2rem auto;padding:3rem}
table{width:100%;border-collapse:collapse}td,th{border-bottom:1px solid #e7e5e4;padding:8px;text-align:left}
.muted{color:#78716c;font-size:.85rem;text-transform:uppercase;letter-spacing:.05em}
.highlight{background:#7f1d1d;color:#fff;padding:1rem;margin-top:1rem}
.terms{white-space:pre-line;font-size:.8rem;color:#57534e}
.footer{display:flex;justify-content:space-between;font-size:.75rem;color:#78716c;border-top:1px solid #e7e5e4;margin-top:2rem;padding-top:1rem}
@media print{
  body *{visibility:hidden}
  #printable-area,#printable-area *{visibility:visible}
  #printable-area{position:fixed;left:0;top:0;width:100%;margin:0;padding:2rem}
  .toolbar{display:none}
}
"""

SHOP_CSS = """
body{font-family:sans-serif;margin:0;background:#fafaf9;color:#1c1917}
nav,footer{padding:1rem 2rem;background:#1c1917;color:#fff}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(280px,1fr));gap:1.5rem;padding:2rem}
.card{background:#fff;border:1px solid #e7e5e4}.card img{width:100%;height:180px;object-fit:cover}
.card .body{padding:1rem}.status{font-size:.75rem;text-transform:uppercase;font-weight:bold}
.makes a{margin-right:.5rem}.makes a.active{font-weight:bold;color:#7f1d1d}
"""


def format_amount(value: Optional[float]) -> str:
    """Thousands-separated amount with the configured currency, e.g. 'AED 310,000'."""
    value = value or 0
    if float(value).is_integer():
        return f"{config.CURRENCY} {int(value):,}"
    return f"{config.CURRENCY} {value:,.2f}"


def whatsapp_link(car_name: str) -> str:
    message = f"Hi {config.DEALER_NAME}, I am interested in the {car_name}."
    return f"https://wa.me/?text={quote(message, safe='')}"


def _page(title: str, body: str, css: str = PRINT_CSS) -> str:
    return (
        f"<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>{escape(title)}</title>"
        f"<style>{css}</style></head><body>{body}</body></html>"
    )


def _toolbar(label: str) -> str:
    return (
        f"<div class=\"toolbar\"><span>{escape(label)}</span>"
        "<button onclick=\"window.print()\">Print</button></div>"
    )


def render_quotation(quotation: Quotation, terms: str, customer: Optional[Customer] = None) -> str:
    """
    Render a quotation for print.

    ``terms`` is the current global terms text; ``customer`` is only used to
    fill phone/email when the quotation's own snapshot left them empty.
    """
    phone = quotation.customer_phone or (customer.phone if customer else "")
    email = quotation.customer_email or (customer.email if customer else "")
    down_payment = quotation.down_payment or 0
    # a negative down payment adds to the balance
    down_sign = "+" if down_payment < 0 else "-"
    add_ons_html = ""
    if quotation.add_ons:
        items = "".join(f"<li>{escape(a)}</li>" for a in quotation.add_ons)
        add_ons_html = f"<h3 class=\"muted\">Complimentary Services</h3><ul class=\"add-ons\">{items}</ul>"
    vin_html = f"<p class=\"muted\">VIN: {escape(quotation.vin)}</p>" if quotation.vin else ""

    body = f"""
    {_toolbar('Quotation Preview')}
    <div id="printable-area">
      <header>
        <h1>{escape(config.DEALER_NAME)}</h1>
        <p class="muted">{escape(config.DEALER_TAGLINE)}</p>
        <h2>Quotation</h2>
        <p class="reference">REF: {quotation_reference(quotation.id)}</p>
      </header>
      <section class="customer">
        <h3 class="muted">Customer Details</h3>
        <p>{escape(quotation.customer_name)}</p>
        <p>{escape(phone or '')}</p>
        <p>{escape(email or '')}</p>
      </section>
      <section class="info">
        <h3 class="muted">Quotation Info</h3>
        <p>Date: {quotation.date.isoformat()}</p>
        <p>Valid Until: {VALIDITY_DAYS} Days</p>
      </section>
      <section class="vehicle">
        <h3 class="muted">Vehicle Specification</h3>
        <table><thead><tr><th>Description</th><th>Model Year</th><th>Unit Price</th></tr></thead>
        <tbody><tr><td>{escape(quotation.vehicle_make)} {escape(quotation.vehicle_model)}{vin_html}</td>
        <td>{quotation.vehicle_year}</td><td>{format_amount(quotation.price)}</td></tr></tbody></table>
      </section>
      <section class="extras">
        {add_ons_html}
        <p class="muted">Terms &amp; Conditions</p>
        <p class="terms">{escape(terms)}</p>
      </section>
      <section class="financials">
        <h3 class="muted">Financial Breakdown</h3>
        <p>Vehicle Price: <span class="price">{format_amount(quotation.price)}</span></p>
        <p>Down Payment: <span class="down-payment">{down_sign} {format_amount(abs(down_payment))}</span></p>
        <p>Balance Amount: <span class="balance">{format_amount(compute_balance(quotation.price, down_payment))}</span></p>
        <div class="highlight">
          <p class="muted">Estimated Monthly Installment</p>
          <p class="installment">{format_amount(round_half_up(quotation.monthly_payment))}</p>
          <p>for {quotation.tenure or 0} Months</p>
        </div>
        <p class="muted">Authorized Signature</p>
      </section>
      <div class="footer">
        <span>{escape(config.DEALER_LEGAL_NAME)}</span>
        <span>{escape(config.DEALER_ADDRESS)}</span>
        <span>{escape(config.DEALER_PHONE)}</span>
      </div>
    </div>
    """
    return _page(f"Quotation {quotation_reference(quotation.id)}", body)


def render_receipt(receipt: Receipt) -> str:
    body = f"""
    {_toolbar('Receipt Preview')}
    <div id="printable-area">
      <h2>Receipt</h2>
      <p class="muted">{escape(config.DEALER_LEGAL_NAME)}</p>
      <p class="reference">ID: {escape(receipt.id[:8])}</p>
      <table><tbody>
        <tr><th>Date</th><td>{receipt.date.isoformat()}</td></tr>
        <tr><th>Customer</th><td>{escape(receipt.customer_name)}</td></tr>
        <tr><th>Mode</th><td>{escape(receipt.payment_method)}</td></tr>
        <tr><th>For Vehicle</th><td>{escape(receipt.vehicle_description)}</td></tr>
      </tbody></table>
      <div class="highlight">
        <p class="muted">Total Amount Received</p>
        <p class="amount">{format_amount(receipt.amount)}</p>
      </div>
      <p class="muted">Authorized Signature</p>
    </div>
    """
    return _page(f"Receipt {receipt.id[:8]}", body)


def render_shop(cars: Iterable[Car], makes: List[str], selected_make: str = "All", term: str = "") -> str:
    """Public storefront: no admin sidebar, same car collection as the inventory."""
    make_links = "".join(
        f"<a class=\"{'active' if make == selected_make else ''}\" href=\"/shop?make={quote(make)}\">{escape(make)}</a>"
        for make in makes
    )
    cards = []
    for car in cars:
        name = f"{car.year} {car.make} {car.model}"
        cards.append(
            f"<div class=\"card\"><img src=\"{escape(car.image_url)}\" alt=\"{escape(car.make)} {escape(car.model)}\">"
            f"<div class=\"body\"><span class=\"status\">{escape(car.status)}</span>"
            f"<h3>{escape(name)}</h3><p>{format_amount(car.price)} &middot; {car.mileage:,} km</p>"
            f"<p>{escape(car.description)}</p>"
            f"<a class=\"whatsapp\" href=\"{escape(whatsapp_link(name))}\" target=\"_blank\" rel=\"noopener\">Enquire on WhatsApp</a>"
            f"</div></div>"
        )
    if not cards:
        cards.append("<p>No vehicles match your search. <a href=\"/shop\">Clear Filters</a></p>")
    cards_html = "".join(cards)

    body = f"""
    <nav><strong>{escape(config.DEALER_NAME)}</strong> {escape(config.DEALER_TAGLINE)}</nav>
    <header style="padding:2rem">
      <p>Experience the finest selection of premium pre-owned vehicles in Dubai.</p>
      <form action="/shop"><input name="q" value="{escape(term)}" placeholder="Search models...">
      <input type="hidden" name="make" value="{escape(selected_make)}"></form>
      <div class="makes">{make_links}</div>
    </header>
    <main class="grid">{cards_html}</main>
    <footer>
      <p>{escape(config.DEALER_LEGAL_NAME)}</p>
      <p>{escape(config.DEALER_PHONE)} &middot; {escape(config.DEALER_WHATSAPP)} &middot; {escape(config.DEALER_SHOWROOM)}</p>
    </footer>
    """
    return _page(f"{config.DEALER_NAME} Showroom", body, css=SHOP_CSS)
