# storefront/utils/slug.py
import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    URL-friendly form of a category name.

    Lowercases, collapses every run of characters outside [a-z0-9] into a
    single hyphen and strips hyphens from both ends, so
    "Electronics & Gadgets!!" becomes "electronics-gadgets".
    Applying it to its own output returns the same string.
    """
    return _NON_ALNUM.sub("-", (name or "").lower()).strip("-")
