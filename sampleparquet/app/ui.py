"""Server-rendered pages.

Every GET under the base path goes through the navigation controller: the
request URL seeds a history, the session is checked, and the gate decides
which view renders. A rewritten location (anonymous admin access) becomes
an HTTP redirect.
"""

from __future__ import annotations

from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict

from flask import Blueprint, current_app, flash, json, redirect, render_template, request

from sampleparquet.app.common.auth import FlaskSessionAuth, load_session_store
from sampleparquet.app.common.errors import ApiError, abort_json
from sampleparquet.app.extensions import db
from sampleparquet.app.models import Category, GalleryItem, Product, QUOTE_STATUSES, SiteSetting, settings_map
from sampleparquet.modules.admin.routes import (
    dashboard_counts,
    delete_category_by_id,
    delete_product_by_id,
    filtered_quotes,
    save_category,
    save_product,
    set_quote_status,
    update_setting_values,
)
from sampleparquet.modules.catalog.routes import (
    PRODUCT_FILTERS,
    filtered_products,
    product_by_slug,
    record_product_view,
    related_products,
)
from sampleparquet.modules.content.routes import (
    approved_testimonials,
    faq_by_category,
    gallery_items,
    post_by_slug,
    published_posts,
    related_posts,
)
from sampleparquet.modules.submissions.routes import create_contact_submission, create_quote_request
from sampleparquet.navigation.base_path import with_base_path
from sampleparquet.navigation.controller import NavigationController
from sampleparquet.navigation.gate import AccessGate, GateDecision, GateState
from sampleparquet.navigation.history import MemoryHistory
from sampleparquet.navigation.resolver import DASHBOARD_PATH, LOGIN_PATH
from sampleparquet.navigation.session import SessionStore
from sampleparquet.navigation.views import Resolution, View

ui_bp = Blueprint("ui", __name__)

Renderer = Callable[[Resolution, SessionStore], object]
RENDERERS: Dict[View, Renderer] = {}

HEADER_SETTINGS = ["company_name", "company_tagline", "logo_url", "contact_email", "contact_phone", "contact_address"]


def renders(view: View):
    def register(fn: Renderer) -> Renderer:
        RENDERERS[view] = fn
        return fn

    return register


def href(path: str) -> str:
    return with_base_path(path, current_app.config["BASE_PATH"])


@ui_bp.app_context_processor
def inject_site():
    """Base-path aware links and header/footer settings for every template."""
    return {
        "href": href,
        "site": settings_map(HEADER_SETTINGS),
        "site_name": current_app.config["SITE_NAME"],
        "current_year": datetime.utcnow().year,
    }


@ui_bp.get("/", defaults={"path": ""})
@ui_bp.get("/<path:path>")
def page(path: str):
    if path == "api" or path.startswith("api/"):
        abort_json(404, "not_found", "Resource not found")

    history = MemoryHistory(request.path, origin=request.host_url)
    store = SessionStore()
    nav = NavigationController(history, store, base_path=current_app.config["BASE_PATH"])
    nav.start()
    store.check(FlaskSessionAuth())

    if nav.decision.redirect_to is not None:
        return redirect(history.location)
    return render_decision(nav.decision, store)


def render_decision(decision: GateDecision, store: SessionStore):
    if decision.state is GateState.CHECKING or decision.resolution is None:
        return render_template("pages/loading.html")
    return RENDERERS[decision.resolution.view](decision.resolution, store)


# --- Public pages ---
@renders(View.HOME)
def home(resolution: Resolution, store: SessionStore):
    featured = Product.query.filter(Product.featured.is_(True)).order_by(Product.id.asc()).limit(6).all()
    categories = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    posts = published_posts().limit(3).all()
    testimonials = approved_testimonials().limit(6).all()
    hero = settings_map(["carousel_images", "hero_title", "hero_subtitle"])
    return render_template(
        "pages/home.html",
        featured=featured,
        categories=categories,
        posts=posts,
        testimonials=testimonials,
        hero=hero,
    )


@renders(View.PRODUCT_LIST)
def product_list(resolution: Resolution, store: SessionStore):
    filters = {key: (request.args.get(key) or "").strip() for key in PRODUCT_FILTERS}
    categories = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    products = filtered_products(request.args).all()
    return render_template("pages/products.html", products=products, categories=categories, filters=filters)


@renders(View.PRODUCT_DETAIL)
def product_detail(resolution: Resolution, store: SessionStore):
    product = product_by_slug(resolution.slug or "")
    if product is None:
        return render_template("pages/product_detail.html", product=None, related=[]), 404

    record_product_view(product)
    return render_template("pages/product_detail.html", product=product, related=related_products(product))


@renders(View.ABOUT)
def about(resolution: Resolution, store: SessionStore):
    return render_template("pages/about.html")


@renders(View.SERVICES)
def services(resolution: Resolution, store: SessionStore):
    return render_template("pages/services.html")


@renders(View.GALLERY)
def gallery(resolution: Resolution, store: SessionStore):
    category = (request.args.get("category") or "").strip()
    categories = [
        c for (c,) in GalleryItem.query.with_entities(GalleryItem.category).distinct().order_by(GalleryItem.category)
        if c
    ]
    return render_template(
        "pages/gallery.html",
        items=gallery_items(category).all(),
        categories=categories,
        category=category,
    )


@renders(View.BLOG_LIST)
def blog_list(resolution: Resolution, store: SessionStore):
    return render_template("pages/blog.html", posts=published_posts().all())


@renders(View.BLOG_DETAIL)
def blog_detail(resolution: Resolution, store: SessionStore):
    post = post_by_slug(resolution.slug or "")
    if post is None:
        return render_template("pages/blog_detail.html", post=None, related=[]), 404
    return render_template("pages/blog_detail.html", post=post, related=related_posts(post))


@renders(View.FAQ)
def faq(resolution: Resolution, store: SessionStore):
    return render_template("pages/faq.html", groups=faq_by_category())


@renders(View.CONTACT)
def contact(resolution: Resolution, store: SessionStore):
    return render_template("pages/contact.html")


@renders(View.GET_QUOTE)
def get_quote(resolution: Resolution, store: SessionStore):
    products = Product.query.filter(Product.in_stock.is_(True)).order_by(Product.name.asc()).all()
    selected = (request.args.get("product") or "").strip()
    return render_template("pages/get_quote.html", products=products, selected=selected)


# --- Admin pages ---
@renders(View.ADMIN_LOGIN)
def admin_login(resolution: Resolution, store: SessionStore):
    if store.is_admin:
        return redirect(href(DASHBOARD_PATH))
    return render_template("admin/login.html")


@renders(View.ADMIN_DASHBOARD)
def admin_dashboard(resolution: Resolution, store: SessionStore):
    return render_template("admin/dashboard.html", admin=store.admin, current="dashboard", counts=dashboard_counts())


@renders(View.ADMIN_PRODUCTS)
def admin_products(resolution: Resolution, store: SessionStore):
    products = Product.query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    categories = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    return render_template(
        "admin/products.html", admin=store.admin, current="products", products=products, categories=categories
    )


@renders(View.ADMIN_CATEGORIES)
def admin_categories(resolution: Resolution, store: SessionStore):
    categories = Category.query.order_by(Category.display_order.asc(), Category.id.asc()).all()
    return render_template("admin/categories.html", admin=store.admin, current="categories", categories=categories)


@renders(View.ADMIN_QUOTES)
def admin_quotes(resolution: Resolution, store: SessionStore):
    search = (request.args.get("q") or "").strip()
    status = (request.args.get("status") or "all").strip()
    return render_template(
        "admin/quotes.html",
        admin=store.admin,
        current="quotes",
        quotes=filtered_quotes(search, status).all(),
        statuses=QUOTE_STATUSES,
        search=search,
        status=status,
    )


@renders(View.ADMIN_SETTINGS)
def admin_settings(resolution: Resolution, store: SessionStore):
    settings = SiteSetting.query.order_by(SiteSetting.setting_key.asc()).all()
    return render_template("admin/settings.html", admin=store.admin, current="settings", settings=settings)


_missing = set(View) - set(RENDERERS)
if _missing:
    raise RuntimeError(f"views without a renderer: {sorted(v.value for v in _missing)}")


# --- Form posts ---
@ui_bp.post("/contact")
def contact_post():
    try:
        create_contact_submission(request.form.to_dict())
    except ApiError as err:
        flash(err.message, "error")
        return redirect(href("/contact"))

    flash("Thanks! We'll get back to you soon.", "success")
    return redirect(href("/contact"))


@ui_bp.post("/get-quote")
def get_quote_post():
    try:
        create_quote_request(request.form.to_dict())
    except ApiError as err:
        flash(err.message, "error")
        return redirect(href("/get-quote"))

    flash("Your quote request was received.", "success")
    return redirect(href("/get-quote"))


@ui_bp.post(LOGIN_PATH)
def admin_login_post():
    store = SessionStore()
    email = request.form.get("email") or ""
    password = request.form.get("password") or ""
    if not store.sign_in(FlaskSessionAuth(), email, password):
        flash("Sign-in failed. Check your email and password.", "error")
        return redirect(href(LOGIN_PATH))
    return redirect(href(DASHBOARD_PATH))


@ui_bp.post("/admin/logout")
def admin_logout_post():
    SessionStore().sign_out(FlaskSessionAuth())
    flash("Signed out.", "success")
    return redirect(href(LOGIN_PATH))


# --- Admin console forms ---
PRODUCT_TEXT_FIELDS = (
    "name", "slug", "short_description", "description", "thickness",
    "color_tone", "surface_finish", "price_range",
)
SETTING_PREFIX = "setting:"


def admin_form(back: str):
    """Run an admin form action, flash its outcome and redirect to ``back``.

    The session goes through the same access gate as page views, so an
    anonymous post ends up on the login page without touching anything.
    """

    def decorate(fn: Callable[..., str]):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            decision = AccessGate(load_session_store()).check(back)
            if decision.redirect_to is not None:
                return redirect(href(decision.redirect_to))
            try:
                message = fn(*args, **kwargs)
            except ApiError as err:
                flash(err.message, "error")
            else:
                flash(message, "success")
            return redirect(href(back))

        return wrapper

    return decorate


def _product_form(form) -> Dict[str, Any]:
    data: Dict[str, Any] = {key: form[key].strip() for key in PRODUCT_TEXT_FIELDS if key in form}
    if "category_id" in form:
        data["category_id"] = form["category_id"] or None
    # Unchecked boxes are simply absent from the form
    data["in_stock"] = "in_stock" in form
    data["featured"] = "featured" in form
    return data


@ui_bp.post("/admin/products")
@admin_form("/admin/products")
def admin_product_create():
    product = save_product(_product_form(request.form))
    return f"Product {product.name} created."


@ui_bp.post("/admin/products/<int:product_id>")
@admin_form("/admin/products")
def admin_product_update(product_id: int):
    product = db.session.get(Product, product_id)
    if product is None:
        abort_json(404, "not_found", "Product not found")
    save_product(_product_form(request.form), product)
    return f"Product {product.name} saved."


@ui_bp.post("/admin/products/<int:product_id>/delete")
@admin_form("/admin/products")
def admin_product_delete(product_id: int):
    delete_product_by_id(product_id)
    return "Product deleted."


@ui_bp.post("/admin/categories")
@admin_form("/admin/categories")
def admin_category_create():
    data = {key: request.form[key].strip() for key in ("name", "slug", "description") if key in request.form}
    category = save_category(data)
    return f"Category {category.name} created."


@ui_bp.post("/admin/categories/<int:category_id>/delete")
@admin_form("/admin/categories")
def admin_category_delete(category_id: int):
    delete_category_by_id(category_id)
    return "Category deleted."


@ui_bp.post("/admin/quotes/<int:quote_id>/status")
@admin_form("/admin/quotes")
def admin_quote_status(quote_id: int):
    quote = set_quote_status(quote_id, request.form.get("status") or "")
    return f"Quote #{quote.id} marked {quote.status}."


@ui_bp.post("/admin/settings")
@admin_form("/admin/settings")
def admin_settings_update():
    """Each setting is posted as JSON text under ``setting:<key>``."""
    values = {}
    for name, raw in request.form.items():
        if not name.startswith(SETTING_PREFIX):
            continue
        key = name[len(SETTING_PREFIX):]
        try:
            values[key] = json.loads(raw)
        except ValueError:
            abort_json(400, "validation_error", f"{key} is not valid JSON")
    update_setting_values(values)
    return "Settings saved."
