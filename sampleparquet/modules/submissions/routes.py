from __future__ import annotations

import math
import re
from typing import Any, Dict

from flask import Blueprint, current_app

from sampleparquet.app.extensions import db
from sampleparquet.app.models import ContactSubmission, Product, QuoteRequest
from sampleparquet.app.common.errors import abort_json
from sampleparquet.app.common.validation import get_json, require_fields

bp = Blueprint("submissions", __name__)

EMAIL_REGEX = r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$"

QUOTE_REQUIRED = ["product_name", "area_sqm", "delivery_city", "service_type", "customer_name", "customer_phone"]
CONTACT_REQUIRED = ["name", "email", "message"]


def _text(data: Dict[str, Any], key: str) -> str:
    return str(data.get(key) or "").strip()


def create_quote_request(data: Dict[str, Any]) -> QuoteRequest:
    """Validate and store a quote request. Raises ApiError on bad input."""
    require_fields(data, QUOTE_REQUIRED)

    try:
        area = float(data["area_sqm"])
    except (TypeError, ValueError):
        abort_json(400, "validation_error", "area_sqm must be a number")
    if not math.isfinite(area) or area <= 0:
        abort_json(400, "validation_error", "area_sqm must be a positive number")

    email = _text(data, "customer_email").lower()
    if email and not re.match(EMAIL_REGEX, email):
        abort_json(400, "validation_error", "Invalid email format")

    product_id = None
    if data.get("product_id"):
        try:
            product = db.session.get(Product, int(data["product_id"]))
        except (TypeError, ValueError):
            product = None
        if product is None:
            abort_json(400, "validation_error", "Unknown product_id")
        product_id = product.id

    quote = QuoteRequest(
        product_id=product_id,
        product_name=_text(data, "product_name"),
        area_sqm=area,
        delivery_city=_text(data, "delivery_city"),
        delivery_district=_text(data, "delivery_district"),
        service_type=_text(data, "service_type"),
        customer_name=_text(data, "customer_name"),
        customer_phone=_text(data, "customer_phone"),
        customer_email=email,
        notes=_text(data, "notes"),
        status="new",
    )
    db.session.add(quote)
    db.session.commit()
    current_app.logger.info("quote request %s received for %s", quote.id, quote.product_name)
    return quote


def create_contact_submission(data: Dict[str, Any]) -> ContactSubmission:
    """Validate and store a contact form message. Raises ApiError on bad input."""
    require_fields(data, CONTACT_REQUIRED)

    email = _text(data, "email").lower()
    if not re.match(EMAIL_REGEX, email):
        abort_json(400, "validation_error", "Invalid email format")

    msg = ContactSubmission(
        name=_text(data, "name"),
        email=email,
        phone=_text(data, "phone"),
        subject=_text(data, "subject"),
        message=_text(data, "message"),
    )
    db.session.add(msg)
    db.session.commit()
    return msg


@bp.post("/quotes")
def submit_quote():
    """POST /api/quotes - Public quote request form."""
    quote = create_quote_request(get_json())
    return {"id": quote.id, "status": quote.status}, 201


@bp.post("/contact")
def submit_contact():
    """POST /api/contact - Public contact form."""
    msg = create_contact_submission(get_json())
    return {"id": msg.id}, 201
