from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class View(str, Enum):
    """Every page the site can render. Closed set."""

    HOME = "home"
    PRODUCT_LIST = "product-list"
    PRODUCT_DETAIL = "product-detail"
    ABOUT = "about"
    SERVICES = "services"
    GALLERY = "gallery"
    BLOG_LIST = "blog-list"
    BLOG_DETAIL = "blog-detail"
    FAQ = "faq"
    CONTACT = "contact"
    GET_QUOTE = "get-quote"

    ADMIN_LOGIN = "admin-login"
    ADMIN_DASHBOARD = "admin-dashboard"
    ADMIN_PRODUCTS = "admin-products"
    ADMIN_CATEGORIES = "admin-categories"
    ADMIN_QUOTES = "admin-quotes"
    ADMIN_SETTINGS = "admin-settings"


@dataclass(frozen=True)
class Resolution:
    """Selected view plus the path parameters it needs (only ``slug`` today)."""

    view: View
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copied behind a read-only proxy
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __hash__(self) -> int:
        return hash((self.view, frozenset(self.params.items())))

    @property
    def slug(self) -> str | None:
        return self.params.get("slug")
