"""Path -> view resolution.

Pure functions only: nothing here reads the session or touches history.
"""

from __future__ import annotations

from sampleparquet.navigation.views import Resolution, View

ADMIN_PREFIX = "/admin"
LOGIN_PATH = "/admin/login"
DASHBOARD_PATH = "/admin"

EXACT_ROUTES: dict[str, View] = {
    "/": View.HOME,
    "/index.html": View.HOME,
    "/products": View.PRODUCT_LIST,
    "/about": View.ABOUT,
    "/services": View.SERVICES,
    "/gallery": View.GALLERY,
    "/blog": View.BLOG_LIST,
    "/faq": View.FAQ,
    "/contact": View.CONTACT,
    "/get-quote": View.GET_QUOTE,
}

# Checked in order; the remainder after the prefix becomes the slug.
PREFIX_ROUTES: tuple[tuple[str, View], ...] = (
    ("/products/", View.PRODUCT_DETAIL),
    ("/blog/", View.BLOG_DETAIL),
)

ADMIN_ROUTES: dict[str, View] = {
    "/admin": View.ADMIN_DASHBOARD,
    "/admin/": View.ADMIN_DASHBOARD,
    LOGIN_PATH: View.ADMIN_LOGIN,
    "/admin/products": View.ADMIN_PRODUCTS,
    "/admin/categories": View.ADMIN_CATEGORIES,
    "/admin/quotes": View.ADMIN_QUOTES,
    "/admin/settings": View.ADMIN_SETTINGS,
}


def is_admin_path(path: str) -> bool:
    return path.startswith(ADMIN_PREFIX)


def resolve_admin(path: str) -> Resolution:
    """Resolve an admin-scoped path; unknown sub-paths land on the dashboard."""
    return Resolution(ADMIN_ROUTES.get(path, View.ADMIN_DASHBOARD))


def resolve(path: str) -> Resolution:
    """Map a normalized application path to the view that renders it.

    Unmatched paths fall back to the home view; there is no not-found view.
    """
    view = EXACT_ROUTES.get(path)
    if view is not None:
        return Resolution(view)

    for prefix, detail_view in PREFIX_ROUTES:
        if path.startswith(prefix):
            slug = path[len(prefix):]
            if slug:
                return Resolution(detail_view, {"slug": slug})

    if is_admin_path(path):
        return resolve_admin(path)

    return Resolution(View.HOME)
