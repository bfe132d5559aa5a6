from __future__ import annotations

from datetime import datetime
from sqlalchemy import Index

from sampleparquet.app.extensions import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(160), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    image_url = db.Column(db.String(1024), nullable=False, default="")
    display_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    products = db.relationship("Product", back_populates="category", lazy=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "image_url": self.image_url,
            "display_order": self.display_order,
        }


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    short_description = db.Column(db.String(500), nullable=False, default="")
    images = db.Column(db.JSON, nullable=False, default=list)
    specifications = db.Column(db.JSON, nullable=False, default=dict)
    price_range = db.Column(db.String(50), nullable=False, default="")
    thickness = db.Column(db.String(50), nullable=False, default="")
    surface_finish = db.Column(db.String(100), nullable=False, default="")
    color_tone = db.Column(db.String(100), nullable=False, default="")
    in_stock = db.Column(db.Boolean, nullable=False, default=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    warranty_years = db.Column(db.Integer, nullable=False, default=0)
    box_coverage_sqm = db.Column(db.Float, nullable=False, default=0)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    category = db.relationship("Category", back_populates="products")

    __table_args__ = (
        Index("ix_products_featured", "featured"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "category": self.category.slug if self.category else None,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "short_description": self.short_description,
            "images": list(self.images or []),
            "specifications": dict(self.specifications or {}),
            "price_range": self.price_range,
            "thickness": self.thickness,
            "surface_finish": self.surface_finish,
            "color_tone": self.color_tone,
            "in_stock": self.in_stock,
            "featured": self.featured,
            "warranty_years": self.warranty_years,
            "box_coverage_sqm": self.box_coverage_sqm,
            "view_count": self.view_count,
        }


class BlogPost(db.Model):
    __tablename__ = "blog_posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(280), nullable=False, unique=True, index=True)
    cover_image = db.Column(db.String(1024), nullable=False, default="")
    summary = db.Column(db.Text, nullable=False, default="")
    content = db.Column(db.Text, nullable=False, default="")
    author = db.Column(db.String(120), nullable=False, default="")
    tags = db.Column(db.JSON, nullable=False, default=list)
    published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)
    view_count = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_blog_posts_published", "published", "published_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "cover_image": self.cover_image,
            "summary": self.summary,
            "content": self.content,
            "author": self.author,
            "tags": list(self.tags or []),
            "published": self.published,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "view_count": self.view_count,
        }


class GalleryItem(db.Model):
    __tablename__ = "gallery_items"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.String(1024), nullable=False)
    thumbnail_url = db.Column(db.String(1024), nullable=False, default="")
    category = db.Column(db.String(100), nullable=False, default="")
    location = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    display_order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "thumbnail_url": self.thumbnail_url,
            "category": self.category,
            "location": self.location,
            "description": self.description,
        }


class Testimonial(db.Model):
    __tablename__ = "testimonials"

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(120), nullable=False)
    rating = db.Column(db.Integer, nullable=False, default=5)  # 1..5
    comment = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(255), nullable=False, default="")
    project_type = db.Column(db.String(120), nullable=False, default="")
    approved = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "rating": self.rating,
            "comment": self.comment,
            "location": self.location,
            "project_type": self.project_type,
        }


class FaqItem(db.Model):
    __tablename__ = "faq_items"

    id = db.Column(db.Integer, primary_key=True)
    question = db.Column(db.String(500), nullable=False)
    answer = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=False, default="")
    display_order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "category": self.category,
            "display_order": self.display_order,
        }


class ContactSubmission(db.Model):
    __tablename__ = "contact_submissions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=False, default="")
    subject = db.Column(db.String(255), nullable=False, default="")
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "subject": self.subject,
            "message": self.message,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


QUOTE_STATUSES = ("new", "contacted", "quoted", "closed")


class QuoteRequest(db.Model):
    __tablename__ = "quote_requests"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_name = db.Column(db.String(200), nullable=False)
    area_sqm = db.Column(db.Float, nullable=False, default=0)
    delivery_city = db.Column(db.String(120), nullable=False)
    delivery_district = db.Column(db.String(120), nullable=False, default="")
    service_type = db.Column(db.String(120), nullable=False)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_phone = db.Column(db.String(50), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False, default="")
    notes = db.Column(db.Text, nullable=False, default="")
    status = db.Column(db.String(20), nullable=False, default="new")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_quote_requests_status_created", "status", "created_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "area_sqm": self.area_sqm,
            "delivery_city": self.delivery_city,
            "delivery_district": self.delivery_district,
            "service_type": self.service_type,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_email": self.customer_email,
            "notes": self.notes,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class SiteSetting(db.Model):
    __tablename__ = "site_settings"

    id = db.Column(db.Integer, primary_key=True)
    setting_key = db.Column(db.String(100), nullable=False, unique=True, index=True)
    setting_value = db.Column(db.JSON, nullable=True)
    setting_type = db.Column(db.String(30), nullable=False, default="text")
    description = db.Column(db.String(255), nullable=False, default="")

    def to_dict(self) -> dict:
        return {
            "setting_key": self.setting_key,
            "setting_value": self.setting_value,
            "setting_type": self.setting_type,
            "description": self.description,
        }


class AdminUser(db.Model):
    __tablename__ = "admin_users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120), nullable=False, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


def settings_map(keys: list[str] | None = None) -> dict:
    """``{setting_key: setting_value}`` for all settings, or only ``keys``."""
    q = SiteSetting.query
    if keys:
        q = q.filter(SiteSetting.setting_key.in_(keys))
    return {s.setting_key: s.setting_value for s in q.all()}
