"""
Slug Generation Utilities
Builds URL keys like "ana-e-joao-x7k2" from participant names
"""

import re
import secrets
import string
import unicodedata
from typing import Optional

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 4
MAX_NAME_LENGTH = 40

SLUG_PATTERN = re.compile(r"^[a-z0-9-]{3,120}$")


def normalize_name(name: str) -> str:
    """Lowercase, strip accents, keep only a-z0-9"""
    decomposed = unicodedata.normalize("NFD", name or "")
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]", "", without_marks.lower())[:MAX_NAME_LENGTH]


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_slug(name1: str, name2: Optional[str] = None, suffix: Optional[str] = None) -> str:
    """Generate a slug from the names plus a short random suffix"""
    first = normalize_name(name1) or "pagina"
    base = first
    if name2:
        second = normalize_name(name2)
        if second:
            base = f"{first}-e-{second}"

    return f"{base}-{suffix or random_suffix()}"


def is_valid_slug(value) -> bool:
    return isinstance(value, str) and bool(SLUG_PATTERN.match(value))
