"""Canonical task categories and the normaliser shared by every writer."""

from __future__ import annotations

CANONICAL_CATEGORIES: tuple[str, ...] = (
    "work",
    "personal",
    "health",
    "learning",
    "shopping",
    "other",
)

DEFAULT_CATEGORY = "other"

_CATEGORY_ALIASES: dict[str, str] = {
    "学习": "learning",
    "工作": "work",
    "个人": "personal",
    "健康": "health",
    "购物": "shopping",
    "其他": "other",
    # Known misspellings seen in stored data
    "lreaning": "learning",
    "learing": "learning",
}


def normalize_category(raw: str | None) -> str:
    """Map *raw* onto one of :data:`CANONICAL_CATEGORIES`.

    Canonical labels pass through unchanged, localized labels and known
    misspellings are translated, and anything else becomes ``"other"``.
    The function is idempotent.
    """
    if not isinstance(raw, str):
        return DEFAULT_CATEGORY

    value = raw.strip()
    if value.lower() in CANONICAL_CATEGORIES:
        return value.lower()

    return _CATEGORY_ALIASES.get(value, _CATEGORY_ALIASES.get(value.lower(), DEFAULT_CATEGORY))
