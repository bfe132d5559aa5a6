from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import Blueprint, current_app, request
from sqlalchemy import or_

from sampleparquet.app.extensions import db
from sampleparquet.app.models import (
    QUOTE_STATUSES,
    BlogPost,
    Category,
    ContactSubmission,
    GalleryItem,
    Product,
    QuoteRequest,
    SiteSetting,
    Testimonial,
)
from sampleparquet.app.common.auth import admin_required
from sampleparquet.app.common.errors import abort_json
from sampleparquet.app.common.slugs import slugify
from sampleparquet.app.common.validation import get_json, require_fields

bp = Blueprint("admin", __name__)

PRODUCT_FIELDS = (
    "category_id", "name", "slug", "description", "short_description", "images",
    "specifications", "price_range", "thickness", "surface_finish", "color_tone",
    "in_stock", "featured", "warranty_years", "box_coverage_sqm",
)
CATEGORY_FIELDS = ("name", "slug", "description", "image_url", "display_order")


def dashboard_counts() -> Dict[str, int]:
    return {
        "products": Product.query.count(),
        "blog_posts": BlogPost.query.count(),
        "gallery_items": GalleryItem.query.count(),
        "testimonials": Testimonial.query.count(),
        "contact_submissions": ContactSubmission.query.count(),
        "quote_requests": QuoteRequest.query.count(),
    }


def filtered_quotes(search: str = "", status: str = ""):
    q = QuoteRequest.query
    if status and status != "all":
        q = q.filter(QuoteRequest.status == status)
    if search:
        like = f"%{search}%"
        q = q.filter(
            or_(
                QuoteRequest.customer_name.ilike(like),
                QuoteRequest.customer_email.ilike(like),
                QuoteRequest.product_name.ilike(like),
            )
        )
    return q.order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc())


def _slug_for(model, data: Dict[str, Any], current=None) -> str:
    """Requested slug, or one generated from the name. 409 when another row has it.

    Must run before ``current`` is modified: the lookup autoflushes.
    """
    requested = data["slug"] if "slug" in data else (current.slug if current is not None else "")
    name = data.get("name") or (current.name if current is not None else "")
    slug = str(requested or "").strip() or slugify(name)

    q = model.query.filter(model.slug == slug)
    if current is not None:
        q = q.filter(model.id != current.id)
    if q.first():
        abort_json(409, "conflict", "Slug already in use", {"slug": slug})
    return slug


def _check_category(data: Dict[str, Any]) -> None:
    """400 unless ``category_id`` is absent, null or an existing category."""
    category_id = data.get("category_id")
    if category_id is None:
        return
    try:
        category = db.session.get(Category, int(category_id))
    except (TypeError, ValueError):
        category = None
    if category is None:
        abort_json(400, "validation_error", "Unknown category_id", {"category_id": category_id})
    data["category_id"] = category.id


def _apply(obj, data: Dict[str, Any], fields) -> None:
    for key in fields:
        if key in data:
            setattr(obj, key, data[key])


# Shared by the JSON endpoints below and the admin page forms.
def save_product(data: Dict[str, Any], product: Optional[Product] = None) -> Product:
    """Create (``product`` is None) or update a product. Raises ApiError on bad input."""
    if product is None:
        require_fields(data, ["name"])

    slug = _slug_for(Product, data, current=product)
    _check_category(data)

    p = product or Product()
    _apply(p, data, PRODUCT_FIELDS)
    p.slug = slug
    if product is None or "images" in data:
        p.images = [img for img in (p.images or []) if str(img).strip()]

    if product is None:
        db.session.add(p)
    db.session.commit()
    current_app.logger.info("product %s %s", p.slug, "created" if product is None else "updated")
    return p


def delete_product_by_id(product_id: int) -> bool:
    p = db.session.get(Product, product_id)
    if not p:
        return False

    db.session.delete(p)
    db.session.commit()
    current_app.logger.info("product %s deleted", product_id)
    return True


def save_category(data: Dict[str, Any], category: Optional[Category] = None) -> Category:
    if category is None:
        require_fields(data, ["name"])

    slug = _slug_for(Category, data, current=category)
    c = category or Category()
    _apply(c, data, CATEGORY_FIELDS)
    c.slug = slug
    if category is None and "display_order" not in data:
        c.display_order = Category.query.count()

    if category is None:
        db.session.add(c)
    db.session.commit()
    return c


def delete_category_by_id(category_id: int) -> bool:
    c = db.session.get(Category, category_id)
    if not c:
        return False

    # Products stay in the catalog, uncategorized
    Product.query.filter_by(category_id=c.id).update({"category_id": None})
    db.session.delete(c)
    db.session.commit()
    return True


def set_quote_status(quote_id: int, status: str) -> QuoteRequest:
    if status not in QUOTE_STATUSES:
        abort_json(400, "validation_error", "Invalid status", {"allowed": list(QUOTE_STATUSES)})

    quote = db.session.get(QuoteRequest, quote_id)
    if not quote:
        abort_json(404, "not_found", "Quote request not found")

    quote.status = status
    db.session.commit()
    return quote


def update_setting_values(values: Dict[str, Any]) -> List[str]:
    """Overwrite existing settings by key. 404 if any key is unknown."""
    if not isinstance(values, dict) or not values:
        abort_json(400, "validation_error", "settings must be a non-empty object")

    existing = {s.setting_key: s for s in SiteSetting.query.filter(SiteSetting.setting_key.in_(list(values))).all()}
    unknown = sorted(set(values) - set(existing))
    if unknown:
        abort_json(404, "not_found", "Unknown setting keys", {"keys": unknown})

    for key, value in values.items():
        existing[key].setting_value = value

    db.session.commit()
    current_app.logger.info("settings updated: %s", ", ".join(sorted(values)))
    return sorted(values)


# --- Dashboard ---
@bp.get("/admin/stats")
@admin_required
def stats():
    return {"counts": dashboard_counts()}, 200


# --- Products ---
@bp.get("/admin/products")
@admin_required
def list_products():
    search = (request.args.get("q") or "").strip()
    q = Product.query
    if search:
        q = q.filter(Product.name.ilike(f"%{search}%"))
    items = q.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return {"items": [p.to_dict() for p in items]}, 200


@bp.post("/admin/products")
@admin_required
def create_product():
    return save_product(get_json()).to_dict(), 201


@bp.put("/admin/products/<int:product_id>")
@admin_required
def update_product(product_id: int):
    data = get_json()
    p = db.session.get(Product, product_id)
    if not p:
        abort_json(404, "not_found", "Product not found")
    return save_product(data, p).to_dict(), 200


@bp.delete("/admin/products/<int:product_id>")
@admin_required
def delete_product(product_id: int):
    if not delete_product_by_id(product_id):
        return {"message": "no_op"}, 204
    return {"message": "deleted"}, 200


# --- Categories ---
@bp.get("/admin/categories")
@admin_required
def list_categories():
    items = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    return {"items": [c.to_dict() for c in items]}, 200


@bp.post("/admin/categories")
@admin_required
def create_category():
    return save_category(get_json()).to_dict(), 201


@bp.put("/admin/categories/<int:category_id>")
@admin_required
def update_category(category_id: int):
    data = get_json()
    c = db.session.get(Category, category_id)
    if not c:
        abort_json(404, "not_found", "Category not found")
    return save_category(data, c).to_dict(), 200


@bp.delete("/admin/categories/<int:category_id>")
@admin_required
def delete_category(category_id: int):
    if not delete_category_by_id(category_id):
        return {"message": "no_op"}, 204
    return {"message": "deleted"}, 200


# --- Quote requests ---
@bp.get("/admin/quotes")
@admin_required
def list_quotes():
    search = (request.args.get("q") or "").strip()
    status = (request.args.get("status") or "").strip()
    return {"items": [q.to_dict() for q in filtered_quotes(search, status).all()]}, 200


@bp.patch("/admin/quotes/<int:quote_id>")
@admin_required
def update_quote_status(quote_id: int):
    data = get_json()
    require_fields(data, ["status"])
    quote = set_quote_status(quote_id, str(data["status"]))
    return {"id": quote.id, "status": quote.status}, 200


@bp.delete("/admin/quotes/<int:quote_id>")
@admin_required
def delete_quote(quote_id: int):
    quote = db.session.get(QuoteRequest, quote_id)
    if not quote:
        return {"message": "no_op"}, 204

    db.session.delete(quote)
    db.session.commit()
    return {"message": "deleted"}, 200


# --- Contact submissions ---
@bp.get("/admin/contacts")
@admin_required
def list_contacts():
    items = ContactSubmission.query.order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc()).all()
    return {"items": [c.to_dict() for c in items]}, 200


# --- Site settings ---
@bp.get("/admin/settings")
@admin_required
def list_settings():
    items = SiteSetting.query.order_by(SiteSetting.setting_key.asc()).all()
    return {"items": [s.to_dict() for s in items]}, 200


@bp.put("/admin/settings")
@admin_required
def update_settings():
    """PUT /api/admin/settings - Update values by key.

    Request JSON:
      {"settings": {"hero_title": "...", "carousel_images": ["..."]}}
    """
    data = get_json()
    return {"updated": update_setting_values(data.get("settings"))}, 200
