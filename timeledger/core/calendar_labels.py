"""Locale-formatted day labels and month names.

Day labels look like ``"Lunedì 19/10/26"``: the capitalised weekday name
followed by ``dd/MM/yy``.  Only the numeric part is read back when a label
has to be turned into a date again.
"""

from __future__ import annotations

import re
from datetime import date, datetime

_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "it": (
        "Lunedì", "Martedì", "Mercoledì", "Giovedì",
        "Venerdì", "Sabato", "Domenica",
    ),
    "en": (
        "Monday", "Tuesday", "Wednesday", "Thursday",
        "Friday", "Saturday", "Sunday",
    ),
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "it": (
        "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
        "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

SUPPORTED_LOCALES: tuple[str, ...] = tuple(_WEEKDAYS)

_DATE_TAIL_RE = re.compile(r"(\d{2}/\d{2}/\d{2})\s*$")


def _check_locale(locale: str) -> str:
    if locale not in _WEEKDAYS:
        raise ValueError(
            f"Unsupported locale {locale!r}; expected one of {SUPPORTED_LOCALES}"
        )
    return locale


def day_label(moment: date | datetime, locale: str = "it") -> str:
    """Format the calendar day of ``moment`` as a row label."""
    weekday = _WEEKDAYS[_check_locale(locale)][moment.weekday()]
    return f"{weekday} {moment.strftime('%d/%m/%y')}"


def parse_day_label(label: str) -> date | None:
    """Recover the date behind a day label, or ``None`` if it has none."""
    match = _DATE_TAIL_RE.search(label)
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), "%d/%m/%y").date()
    except ValueError:
        return None


def month_name(moment: date | datetime, locale: str = "it") -> str:
    return _MONTHS[_check_locale(locale)][moment.month - 1]
