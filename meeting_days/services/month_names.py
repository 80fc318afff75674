# meeting_days/services/month_names.py
from __future__ import annotations

from meeting_days.core.config import get_settings

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "nl": (
        "januari", "februari", "maart", "april", "mei", "juni",
        "juli", "augustus", "september", "oktober", "november", "december",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

FALLBACK_LOCALE = "nl"


def resolve_locale(locale: str | None = None) -> str:
    """
    Map a locale tag (e.g. 'en-GB', 'nl_NL', 'EN') onto a supported language.

    Unknown or missing tags fall back to DEFAULT_LOCALE, and to Dutch if the
    configured default is itself unsupported.
    """
    for candidate in (locale, get_settings().DEFAULT_LOCALE):
        if not candidate:
            continue
        language = candidate.replace("_", "-").split("-", 1)[0].lower()
        if language in MONTH_NAMES:
            return language
    return FALLBACK_LOCALE


def format_month_name(month: int, locale: str | None = None) -> str:
    """
    Return the name of `month` (1-12) in the given locale.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return MONTH_NAMES[resolve_locale(locale)][month - 1]
