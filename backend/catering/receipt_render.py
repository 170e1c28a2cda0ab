"""Printable HTML receipts rendered with Jinja2."""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from jinja2 import Environment, select_autoescape

from catering.utils.money import CURRENCY_SYMBOL, TAX_RATE_PERCENT

logger = logging.getLogger(__name__)

BUSINESS_NAME = "d'sis Catering"
BUSINESS_TAGLINE = "Celebrating Life with Food"
BUSINESS_ADDRESS = "San Lorenzo, Mexico, Pampanga, San Fernando, Philippines"
BUSINESS_CONTACT = "+63 908 342 2706 | dsis_catering28@yahoo.com"

RECEIPT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Receipt - {{ receipt.receiptNumber }}</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 20px; }
    .receipt { max-width: 600px; margin: 0 auto; }
    .header { text-align: center; border-bottom: 2px solid #333; padding-bottom: 20px; margin-bottom: 20px; }
    table { width: 100%; border-collapse: collapse; }
    th, td { border: 1px solid #ddd; padding: 8px; }
    th { background: #f8f9fa; }
    .num { text-align: right; }
    .totals div { display: flex; justify-content: space-between; margin-bottom: 8px; }
    .grand { font-size: 1.2em; font-weight: bold; border-top: 1px solid #ddd; padding-top: 10px; }
  </style>
</head>
<body>
<div class="receipt">
  <div class="header">
    <h2>{{ business.name }}</h2>
    <p>{{ business.tagline }}</p>
    <p>{{ business.address }}<br>{{ business.contact }}</p>
  </div>

  <div>
    <h4>Receipt #: {{ receipt.receiptNumber }}</h4>
    <p><strong>Date:</strong> {{ receipt.issuedDate }}</p>
    <h4>Booking #: {{ receipt.bookingId }}</h4>
    <p><strong>Status:</strong> {{ receipt.paymentStatus }}</p>
    <p><strong>Payment Method:</strong> {{ receipt.paymentMethod }}</p>
  </div>

  <div>
    <h4>Customer Information</h4>
    <p><strong>Name:</strong> {{ receipt.customerName }}</p>
    <p><strong>Email:</strong> {{ receipt.customerEmail }}</p>
    <p><strong>Phone:</strong> {{ receipt.customerPhone }}</p>
  </div>

  <div>
    <h4>Event Details</h4>
    <p><strong>Event Type:</strong> {{ receipt.eventType }}</p>
    <p><strong>Date:</strong> {{ receipt.eventDate }}</p>
    <p><strong>Venue:</strong> {{ receipt.eventVenue }}</p>
    <p><strong>Number of Guests:</strong> {{ receipt.numGuests }}</p>
  </div>

  <div>
    <h4>Menu Items</h4>
    <table>
      <thead>
        <tr><th>Item</th><th>Qty</th><th class="num">Price</th><th class="num">Total</th></tr>
      </thead>
      <tbody>
      {% for item in receipt.get("items", []) %}
        <tr>
          <td>{{ item.itemName }}</td>
          <td>{{ item.quantity }}</td>
          <td class="num">{{ item.unitPrice | money }}</td>
          <td class="num">{{ item.totalPrice | money }}</td>
        </tr>
      {% endfor %}
      </tbody>
    </table>
  </div>

  <div class="totals">
    <div><span><strong>Subtotal:</strong></span><span>{{ receipt.subtotal | money }}</span></div>
    <div><span>VAT ({{ tax_percent }}%):</span><span>{{ receipt.taxAmount | money }}</span></div>
    <div class="grand"><span>Total Amount:</span><span>{{ receipt.totalAmount | money }}</span></div>
  </div>

  <p style="text-align: center; color: #666;">
    Thank you for choosing {{ business.name }}!<br>
    We look forward to making your event memorable.
  </p>
</div>
</body>
</html>
"""


def format_money(amount) -> str:
    """Peso amount with two decimals and thousands separators, e.g. ₱1,120.00."""
    return f"{CURRENCY_SYMBOL}{float(amount or 0):,.2f}"


_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
_env.filters["money"] = format_money
_template = _env.from_string(RECEIPT_TEMPLATE)


def render_receipt_html(receipt: Dict[str, Any]) -> str:
    """Render a serialized receipt (see receipt_to_dict) as a standalone HTML page."""
    return _template.render(
        receipt=receipt,
        tax_percent=TAX_RATE_PERCENT,
        business={
            "name": BUSINESS_NAME,
            "tagline": BUSINESS_TAGLINE,
            "address": BUSINESS_ADDRESS,
            "contact": BUSINESS_CONTACT,
        },
    )


def save_receipt_html(receipt: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write the printable receipt to `path` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_receipt_html(receipt), encoding="utf-8")
    logger.info("[receipts] Saved %s to %s", receipt.get("receiptNumber"), path)
    return path
