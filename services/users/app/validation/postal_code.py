"""Postal code formats by country (ISO 3166-1 alpha-2)."""
from __future__ import annotations

import re
from typing import Pattern

ANY_LOCALE = "any"

_THREE_DIGIT = r"^\d{3}$"
_FOUR_DIGIT = r"^\d{4}$"
_FIVE_DIGIT = r"^\d{5}$"
_SIX_DIGIT = r"^\d{6}$"

_RAW_PATTERNS: dict[str, tuple[str, int]] = {
    "AD": (r"^AD\d{3}$", 0),
    "AT": (_FOUR_DIGIT, 0),
    "AU": (_FOUR_DIGIT, 0),
    "AZ": (r"^AZ\d{4}$", 0),
    "BA": (r"^([7-8]\d{4}$)", 0),
    "BE": (_FOUR_DIGIT, 0),
    "BG": (_FOUR_DIGIT, 0),
    "BR": (r"^\d{5}-?\d{3}$", 0),
    "BY": (r"^2[1-4]\d{4}$", 0),
    "CA": (r"^[ABCEGHJKLMNPRSTVXY]\d[ABCEGHJ-NPRSTV-Z][\s\-]?\d[ABCEGHJ-NPRSTV-Z]\d$", re.IGNORECASE),
    "CH": (_FOUR_DIGIT, 0),
    "CN": (r"^(0[1-7]|1[012356]|2[0-7]|3[0-6]|4[0-7]|5[1-7]|6[1-7]|7[1-5]|8[1345]|9[09])\d{4}$", 0),
    "CO": (
        r"^(05|08|11|13|15|17|18|19|20|23|25|27|41|44|47|50|52|54|63|66|68|70|73|76|81|85|86|88|91|94|95|97|99)(\d{4})$",
        0,
    ),
    "CZ": (r"^\d{3}\s?\d{2}$", 0),
    "DE": (_FIVE_DIGIT, 0),
    "DK": (_FOUR_DIGIT, 0),
    "DO": (_FIVE_DIGIT, 0),
    "DZ": (_FIVE_DIGIT, 0),
    "EE": (_FIVE_DIGIT, 0),
    "ES": (r"^(5[0-2]{1}|[0-4]{1}\d{1})\d{3}$", 0),
    "FI": (_FIVE_DIGIT, 0),
    "FR": (r"^\d{2}\s?\d{3}$", 0),
    "GB": (r"^(gir\s?0aa|[a-z]{1,2}\d[\da-z]?\s?(\d[a-z]{2})?)$", re.IGNORECASE),
    "GR": (r"^\d{3}\s?\d{2}$", 0),
    "HR": (r"^([1-5]\d{4}$)", 0),
    "HT": (r"^HT\d{4}$", 0),
    "HU": (_FOUR_DIGIT, 0),
    "ID": (_FIVE_DIGIT, 0),
    "IE": (r"^(?!.*(?:o))[A-Za-z]\d[\dw]\s\w{4}$", re.IGNORECASE),
    "IL": (r"^(\d{5}|\d{7})$", 0),
    "IN": (r"^((?!10|29|35|54|55|65|66|86|87|88|89)[1-9][0-9]{5})$", 0),
    "IR": (r"^(?!(\d)\1{3})[13-9]{4}[1346-9][013-9]{5}$", 0),
    "IS": (_THREE_DIGIT, 0),
    "IT": (_FIVE_DIGIT, 0),
    "JP": (r"^\d{3}\-\d{4}$", 0),
    "KE": (_FIVE_DIGIT, 0),
    "KR": (r"^(\d{5}|\d{6})$", 0),
    "LI": (r"^(948[5-9]|949[0-7])$", 0),
    "LK": (_FIVE_DIGIT, 0),
    "LT": (r"^LT\-\d{5}$", 0),
    "LU": (_FOUR_DIGIT, 0),
    "LV": (r"^LV\-\d{4}$", 0),
    "MG": (_THREE_DIGIT, 0),
    "MT": (r"^[A-Za-z]{3}\s{0,1}\d{4}$", 0),
    "MX": (_FIVE_DIGIT, 0),
    "MY": (_FIVE_DIGIT, 0),
    "NL": (r"^[1-9]\d{3}\s?(?!sa|sd|ss)[a-z]{2}$", re.IGNORECASE),
    "NO": (_FOUR_DIGIT, 0),
    "NP": (r"^(10|21|22|32|33|34|44|45|56|57)\d{3}$|^(977)$", re.IGNORECASE),
    "NZ": (_FOUR_DIGIT, 0),
    "PE": (_FIVE_DIGIT, 0),
    "PL": (r"^\d{2}\-\d{3}$", 0),
    "PR": (r"^00[679]\d{2}([ -]\d{4})?$", 0),
    "PT": (r"^\d{4}\-\d{3}?$", 0),
    "RO": (_SIX_DIGIT, 0),
    "RU": (_SIX_DIGIT, 0),
    "SA": (_FIVE_DIGIT, 0),
    "SE": (r"^[1-9]\d{2}\s?\d{2}$", 0),
    "SG": (_SIX_DIGIT, 0),
    "SI": (_FOUR_DIGIT, 0),
    "SK": (r"^\d{3}\s?\d{2}$", 0),
    "TH": (_FIVE_DIGIT, 0),
    "TN": (_FOUR_DIGIT, 0),
    "TW": (r"^\d{3}(\d{2})?$", 0),
    "UA": (_FIVE_DIGIT, 0),
    "US": (r"^\d{5}(-\d{4})?$", 0),
    "ZA": (_FOUR_DIGIT, 0),
    "ZM": (_FIVE_DIGIT, 0),
}

_PATTERNS: dict[str, Pattern[str]] = {
    locale: re.compile(pattern, flags) for locale, (pattern, flags) in _RAW_PATTERNS.items()
}


def supported_locales() -> list[str]:
    return sorted(_PATTERNS)


def normalize_locale(locale: str) -> str:
    """Return the canonical key for ``locale`` or raise ``ValueError``."""
    if locale.lower() == ANY_LOCALE:
        return ANY_LOCALE
    if locale.upper() not in _PATTERNS:
        raise ValueError(f"Invalid locale '{locale}'")
    return locale.upper()


def is_postal_code(value: str, locale: str = ANY_LOCALE) -> bool:
    """Return True when ``value`` is a postal code for ``locale``.

    With ``locale="any"`` the value is accepted if it matches the format of
    any known country. An unknown locale raises ``ValueError``.
    """
    locale = normalize_locale(locale)
    if locale == ANY_LOCALE:
        return any(pattern.fullmatch(value) for pattern in _PATTERNS.values())
    return _PATTERNS[locale].fullmatch(value) is not None


__all__ = ["ANY_LOCALE", "is_postal_code", "normalize_locale", "supported_locales"]
