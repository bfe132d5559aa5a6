from __future__ import annotations

from datetime import datetime

import click
from flask import Blueprint
from werkzeug.security import generate_password_hash

from sampleparquet.app.extensions import db
from sampleparquet.app.models import (
    AdminUser,
    BlogPost,
    Category,
    FaqItem,
    GalleryItem,
    Product,
    SiteSetting,
    Testimonial,
)

cli_bp = Blueprint("cli", __name__)

DEFAULT_SETTINGS = [
    ("company_name", "Sample Parquet", "text", "Company name shown in the header"),
    ("company_tagline", "Wood floors since 1998", "text", "Tagline under the logo"),
    ("logo_url", "", "image", "Logo image URL"),
    ("hero_title", "Natural wood for every room", "text", "Home page headline"),
    ("hero_subtitle", "Laminate, engineered and solid parquet with professional installation.", "text", "Home page sub-headline"),
    ("carousel_images", [], "json", "Home page slider images"),
    ("contact_email", "info@example.com", "text", "Public contact email"),
    ("contact_phone", "+90 555 000 00 00", "text", "Public contact phone"),
    ("contact_address", "Istanbul, Turkey", "text", "Showroom address"),
    ("social_facebook", "", "url", "Facebook page"),
    ("social_instagram", "", "url", "Instagram profile"),
    ("social_linkedin", "", "url", "LinkedIn page"),
]


def create_admin_user(email: str, password: str, full_name: str = "") -> AdminUser:
    email = email.strip().lower()
    admin = AdminUser.query.filter_by(email=email).first()
    if admin is None:
        admin = AdminUser(email=email, password_hash="", full_name=full_name)
        db.session.add(admin)
    admin.password_hash = generate_password_hash(password)
    admin.full_name = full_name or admin.full_name
    admin.is_active = True
    db.session.commit()
    return admin


def seed_settings() -> None:
    existing = {s.setting_key for s in SiteSetting.query.all()}
    for key, value, setting_type, description in DEFAULT_SETTINGS:
        if key not in existing:
            db.session.add(
                SiteSetting(setting_key=key, setting_value=value, setting_type=setting_type, description=description)
            )


@cli_bp.cli.command("seed")
def seed_data() -> None:
    """Seed minimal dev data.

    Safe to run multiple times; it will no-op if data exists.
    """
    db.create_all()

    if not AdminUser.query.filter_by(email="admin@example.com").first():
        create_admin_user("admin@example.com", "Password123!", "Site Admin")

    seed_settings()

    if Category.query.count() == 0:
        laminate = Category(name="Laminate", slug="laminate", description="Durable laminate flooring.", display_order=0)
        solid = Category(name="Solid Parquet", slug="solid-parquet", description="Solid hardwood planks.", display_order=1)
        db.session.add_all([laminate, solid])
        db.session.flush()

        db.session.add_all([
            Product(category_id=laminate.id, name="Oak Classic 8mm", slug="oak-classic-8mm",
                    short_description="Natural oak look, AC4.", thickness="8mm", color_tone="Natural",
                    surface_finish="Matte", price_range="mid", featured=True, warranty_years=10,
                    box_coverage_sqm=2.22, images=[]),
            Product(category_id=laminate.id, name="Walnut Dark 10mm", slug="walnut-dark-10mm",
                    short_description="Deep walnut tone.", thickness="10mm", color_tone="Dark",
                    surface_finish="Embossed", price_range="high", featured=True, warranty_years=15,
                    box_coverage_sqm=1.8, images=[]),
            Product(category_id=solid.id, name="Meşe Masif 14mm", slug="mese-masif-14mm",
                    short_description="Solid oak, oiled.", thickness="14mm", color_tone="Light",
                    surface_finish="Oiled", price_range="premium", warranty_years=25,
                    box_coverage_sqm=1.5, images=[]),
        ])

    if BlogPost.query.count() == 0:
        db.session.add(BlogPost(
            title="Choosing the right parquet", slug="choosing-the-right-parquet",
            summary="Thickness, finish and wear class explained.", content="...",
            author="Sample Parquet", tags=["guide", "parquet"], published=True,
            published_at=datetime.utcnow(),
        ))

    if FaqItem.query.count() == 0:
        db.session.add_all([
            FaqItem(question="Do you install?", answer="Yes, our own crews install in the city.", category="Services"),
            FaqItem(question="How long is the warranty?", answer="10 to 25 years depending on the product.", category="Products"),
        ])

    if Testimonial.query.count() == 0:
        db.session.add(Testimonial(customer_name="Ayşe K.", rating=5, comment="Great work, on time.",
                                   location="Kadıköy", project_type="Apartment", approved=True))

    if GalleryItem.query.count() == 0:
        db.session.add(GalleryItem(title="Living room, oak", image_url="/static/gallery/oak.jpg", category="Residential"))

    db.session.commit()
    print("Seed complete. Admin login: admin@example.com / Password123!")


@cli_bp.cli.command("create-admin")
@click.argument("email")
@click.argument("password")
@click.option("--name", default="", help="Full name shown in the admin console.")
def create_admin(email: str, password: str, name: str) -> None:
    """Create an admin user (or reset an existing one's password)."""
    admin = create_admin_user(email, password, name)
    print(f"Admin ready: {admin.email}")
