"""
Slug utilities

Turns free-text names into URL-safe identifiers and resolves collisions
against the existing rows of a table.
"""

import logging
import re
import secrets
import unicodedata
from typing import Awaitable, Callable, Optional

from app.core.exceptions import SlugGenerationError

logger = logging.getLogger(__name__)

# (slug, exclude_id) -> True when another row already uses the slug
SlugExistsFn = Callable[[str, Optional[int]], Awaitable[bool]]

DEFAULT_MAX_ATTEMPTS = 1000
RANDOM_SUFFIX_ATTEMPTS = 5

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

# NFD does not decompose the stroked d
_STROKED = str.maketrans({"đ": "d", "Đ": "D"})


def remove_vietnamese_tones(text: Optional[str]) -> str:
    """Strip tone marks and other diacritics, keeping the base Latin letters

    >>> remove_vietnamese_tones("Đà Nẵng")
    'Da Nang'
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.translate(_STROKED))
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def slugify(text: Optional[str]) -> str:
    """Lowercase, ASCII-only, hyphen-separated form of ``text``

    Punctuation is dropped, whitespace runs become a single hyphen and
    leading/trailing hyphens are trimmed. Empty input gives ``""``.
    """
    if not text:
        return ""
    slug = remove_vietnamese_tones(text).lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(re.fullmatch(SLUG_PATTERN, slug or ""))


async def generate_unique_slug(
    base_slug: str,
    exists: SlugExistsFn,
    exclude_id: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """First free candidate among ``base``, ``base-1``, ``base-2`` ...

    ``exclude_id`` is handed to ``exists`` so a row being renamed does not
    collide with itself. After ``max_attempts`` numeric suffixes a few random
    hex suffixes are tried before giving up with SlugGenerationError.
    """
    if not await exists(base_slug, exclude_id):
        return base_slug

    for counter in range(1, max_attempts + 1):
        candidate = f"{base_slug}-{counter}"
        if not await exists(candidate, exclude_id):
            return candidate

    logger.warning(f"Slug '{base_slug}' exhausted {max_attempts} numeric suffixes, trying random ones")
    for _ in range(RANDOM_SUFFIX_ATTEMPTS):
        candidate = f"{base_slug}-{secrets.token_hex(3)}"
        if not await exists(candidate, exclude_id):
            return candidate

    raise SlugGenerationError(f"Could not generate a unique slug for '{base_slug}'")


async def generate_slug_from_title(
    title: str,
    exists: SlugExistsFn,
    exclude_id: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    fallback: str = "item",
) -> str:
    """slugify + generate_unique_slug; ``fallback`` is the base when the title has no usable characters"""
    base_slug = slugify(title) or fallback
    return await generate_unique_slug(base_slug, exists, exclude_id, max_attempts)
