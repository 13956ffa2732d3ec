"""Product identifier derivation."""

import re
import unicodedata

MAX_ID_LENGTH = 100

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def derive_product_id(nombre: str) -> str:
    """
    Build a URL-safe identifier from a product's display name.

    Lower-cases, strips diacritics, collapses every run of characters outside
    ``[a-z0-9]`` into one hyphen and caps the result at 100 characters.
    Applying it to its own output returns the same string. A name with no
    letters or digits yields ``""``.

    Args:
        nombre: Product display name.

    Returns:
        Derived identifier, e.g. ``"Válvula Ñ 1"`` -> ``"valvula-n-1"``.
    """
    decomposed = unicodedata.normalize("NFD", nombre.lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _NON_ALPHANUMERIC.sub("-", without_marks).strip("-")
    # Truncation can leave a trailing hyphen
    return slug[:MAX_ID_LENGTH].rstrip("-")
