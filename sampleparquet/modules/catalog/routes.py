from __future__ import annotations

from flask import Blueprint, current_app, request

from sampleparquet.app.extensions import db
from sampleparquet.app.models import Category, Product
from sampleparquet.app.common.errors import abort_json
from sampleparquet.app.common.validation import parse_paging

bp = Blueprint("catalog", __name__)

PRODUCT_FILTERS = ("category", "color", "thickness", "surface", "in_stock", "price_range")


def filtered_products(args):
    """Product query narrowed by the catalog filters in ``args``.

    Shared by the JSON endpoint and the product list page.
    """
    q = Product.query

    category = (args.get("category") or "").strip()
    if category:
        q = q.join(Category).filter(Category.slug == category)

    color = (args.get("color") or "").strip()
    if color:
        q = q.filter(Product.color_tone.ilike(f"%{color}%"))

    thickness = (args.get("thickness") or "").strip()
    if thickness:
        q = q.filter(Product.thickness == thickness)

    surface = (args.get("surface") or "").strip()
    if surface:
        q = q.filter(Product.surface_finish.ilike(f"%{surface}%"))

    if (args.get("in_stock") or "").strip().lower() in ("1", "true", "yes", "on"):
        q = q.filter(Product.in_stock.is_(True))

    price_range = (args.get("price_range") or "").strip()
    if price_range:
        q = q.filter(Product.price_range == price_range)

    return q.order_by(Product.created_at.desc(), Product.id.desc())


def product_by_slug(slug: str) -> Product | None:
    return Product.query.filter_by(slug=slug).first()


def related_products(product: Product, limit: int = 3) -> list[Product]:
    if product.category_id is None:
        return []
    return (
        Product.query.filter(Product.category_id == product.category_id, Product.id != product.id)
        .order_by(Product.id.asc())
        .limit(limit)
        .all()
    )


def record_product_view(product: Product) -> None:
    # Single UPDATE so concurrent views don't overwrite each other
    Product.query.filter_by(id=product.id).update({Product.view_count: Product.view_count + 1})
    db.session.commit()


@bp.get("/categories")
def list_categories():
    """GET /api/categories - All categories in display order."""
    categories = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    return {"items": [c.to_dict() for c in categories]}, 200


@bp.get("/products")
def list_products():
    """GET /api/products - Catalog listing.

    Query params:
      - category (slug), color, thickness, surface, in_stock, price_range
      - limit, offset
    """
    limit, offset = parse_paging(current_app.config["DEFAULT_LIMIT"], current_app.config["MAX_LIMIT"])

    q = filtered_products(request.args)
    total = q.count()
    items = q.limit(limit).offset(offset).all()

    return {
        "items": [p.to_dict() for p in items],
        "paging": {"limit": limit, "offset": offset, "total": total},
    }, 200


@bp.get("/products/<slug>")
def get_product(slug: str):
    """GET /api/products/<slug> - Product details plus related products."""
    p = product_by_slug(slug)
    if not p:
        abort_json(404, "not_found", "Product not found")

    record_product_view(p)
    payload = p.to_dict()
    payload["related"] = [r.to_dict() for r in related_products(p)]
    return payload, 200
