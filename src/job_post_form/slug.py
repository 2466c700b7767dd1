import re
import unicodedata
from collections.abc import Iterable
from datetime import datetime

DEFAULT_LOCALE = "pt-BR"

MONTH_NAMES = {
    "pt-BR": [
        "janeiro",
        "fevereiro",
        "março",
        "abril",
        "maio",
        "junho",
        "julho",
        "agosto",
        "setembro",
        "outubro",
        "novembro",
        "dezembro",
    ],
    "en-US": [
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ],
}

# Anything that is not a letter or digit separates words, underscores included
_WORD_SEPARATORS = re.compile(r"[\W_]+")


def kebab_case(text: str) -> str:
    """
    Normalize text into a lowercase, hyphen-separated token sequence.

    Accented characters are folded to their base letter via NFKD
    (e.g. "Março" -> "marco"), so the result is safe to use in URLs.
    """
    if not text:
        return ""
    normalized = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    words = _WORD_SEPARATORS.split(folded.lower())
    return "-".join(word for word in words if word)


def check_locale(locale: str) -> str:
    """Return the locale unchanged, or raise ValueError when no month names exist for it."""
    if locale not in MONTH_NAMES:
        raise ValueError(
            f"Unsupported locale '{locale}'. Expected one of: {', '.join(MONTH_NAMES)}"
        )
    return locale


def month_name(month: int, locale: str = DEFAULT_LOCALE) -> str:
    """Localized, full month name for a 1-based month number."""
    names = MONTH_NAMES[check_locale(locale)]
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return names[month - 1]


def weekday_number(when: datetime) -> int:
    """Day of the week counted from Sunday = 1 to Saturday = 7."""
    return when.isoweekday() % 7 + 1


def join_stack(stack: Iterable[str]) -> str:
    """Join stack tags in a stable order, independent of selection order."""
    return "-".join(sorted(stack, key=lambda tag: (tag.lower(), tag)))


def build_blob(
    title: str,
    stack: Iterable[str],
    company: str,
    curator_name: str,
    year: int,
    month: str,
    day: int,
) -> str:
    """
    Derive the blob identifier of a job post.
    Pure: identical inputs always give byte-identical output.
    """
    raw = f"{title} {join_stack(stack)} {company} {curator_name} {year} {month} {day}"
    return kebab_case(raw)


def blob_for(
    title: str,
    stack: Iterable[str],
    company: str,
    curator_name: str,
    when: datetime,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Derive the blob using the year, localized month and weekday number of `when`."""
    return build_blob(
        title=title,
        stack=stack,
        company=company,
        curator_name=curator_name,
        year=when.year,
        month=month_name(when.month, locale),
        day=weekday_number(when),
    )
