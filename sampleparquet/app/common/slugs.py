import re

_TURKISH = str.maketrans({"ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c"})


def slugify(text: str) -> str:
    """URL slug for a product/category/post name (Turkish letters folded to ASCII)."""
    s = (text or "").lower().translate(_TURKISH)
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")
