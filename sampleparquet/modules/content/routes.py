from __future__ import annotations

from flask import Blueprint, current_app, request

from sampleparquet.app.extensions import db
from sampleparquet.app.models import BlogPost, FaqItem, GalleryItem, Testimonial, settings_map
from sampleparquet.app.common.errors import abort_json
from sampleparquet.app.common.validation import parse_paging

bp = Blueprint("content", __name__)


def published_posts():
    return BlogPost.query.filter(BlogPost.published.is_(True)).order_by(
        BlogPost.published_at.desc(), BlogPost.id.desc()
    )


def post_by_slug(slug: str) -> BlogPost | None:
    return published_posts().filter(BlogPost.slug == slug).first()


def related_posts(post: BlogPost, limit: int = 3) -> list[BlogPost]:
    """Other published posts sharing at least one tag."""
    tags = set(post.tags or [])
    if not tags:
        return []
    related = []
    for other in published_posts().filter(BlogPost.id != post.id).all():
        if tags.intersection(other.tags or []):
            related.append(other)
            if len(related) == limit:
                break
    return related


def approved_testimonials():
    return Testimonial.query.filter(Testimonial.approved.is_(True)).order_by(
        Testimonial.display_order.asc(), Testimonial.id.asc()
    )


def gallery_items(category: str = ""):
    q = GalleryItem.query
    if category:
        q = q.filter(GalleryItem.category == category)
    return q.order_by(GalleryItem.display_order.asc(), GalleryItem.id.asc())


def faq_by_category() -> dict[str, list[FaqItem]]:
    grouped: dict[str, list[FaqItem]] = {}
    for item in FaqItem.query.order_by(FaqItem.display_order.asc(), FaqItem.id.asc()).all():
        grouped.setdefault(item.category or "", []).append(item)
    return grouped


@bp.get("/blog")
def list_posts():
    """GET /api/blog - Published posts, newest first."""
    limit, offset = parse_paging(current_app.config["DEFAULT_LIMIT"], current_app.config["MAX_LIMIT"])
    q = published_posts()
    total = q.count()
    items = q.limit(limit).offset(offset).all()
    return {
        "items": [p.to_dict() for p in items],
        "paging": {"limit": limit, "offset": offset, "total": total},
    }, 200


@bp.get("/blog/<slug>")
def get_post(slug: str):
    """GET /api/blog/<slug> - A published post plus related posts."""
    post = post_by_slug(slug)
    if not post:
        abort_json(404, "not_found", "Post not found")

    BlogPost.query.filter_by(id=post.id).update({BlogPost.view_count: BlogPost.view_count + 1})
    db.session.commit()

    payload = post.to_dict()
    payload["related"] = [r.to_dict() for r in related_posts(post)]
    return payload, 200


@bp.get("/gallery")
def list_gallery():
    category = (request.args.get("category") or "").strip()
    return {"items": [g.to_dict() for g in gallery_items(category).all()]}, 200


@bp.get("/testimonials")
def list_testimonials():
    return {"items": [t.to_dict() for t in approved_testimonials().all()]}, 200


@bp.get("/faq")
def list_faq():
    return {
        "groups": [
            {"category": category, "items": [i.to_dict() for i in items]}
            for category, items in faq_by_category().items()
        ]
    }, 200


@bp.get("/settings")
def public_settings():
    """GET /api/settings - Site settings as a flat key/value map."""
    return {"settings": settings_map()}, 200
