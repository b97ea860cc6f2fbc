from __future__ import annotations
import random
import re
import unicodedata
from datetime import datetime
from typing import Optional

from flowblog.utils.dates import format_slug_date

_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def _is_base_char(ch: str) -> bool:
    cat = unicodedata.category(ch)
    return cat[0] == "L" or cat == "Nd"


def _strip_disallowed(title: str) -> str:
    """
    Keep letters, decimal digits, hyphens and whitespace.
    Combining marks survive only when attached to a kept letter/digit, so
    variation selectors and keycap marks left behind by a removed emoji go too.
    """
    out = []
    attached = False
    for ch in title:
        if _is_base_char(ch):
            out.append(ch)
            attached = True
        elif unicodedata.category(ch)[0] == "M":
            if attached:
                out.append(ch)
        elif ch == "-" or ch.isspace():
            out.append(ch)
            attached = False
        else:
            attached = False
    return "".join(out)


def slugify_title(title: str) -> str:
    text = _strip_disallowed(title or "")
    text = _WHITESPACE_RUN.sub("-", text)
    text = _HYPHEN_RUN.sub("-", text)
    return text.strip("-")


def make_slug(title: str, created_at: datetime) -> str:
    """
    Title + creation date -> "<title-part>-DD-MM-YYYY" (UTC calendar date).

    A title with no permitted characters yields "-DD-MM-YYYY". That degenerate
    form is accepted as-is.
    """
    return f"{slugify_title(title)}-{format_slug_date(created_at)}"


def with_random_suffix(
    initial_slug: str,
    rng: Optional[random.Random] = None,
    *,
    low: int = 10,
    high: int = 99,
) -> str:
    n = (rng or random).randint(low, high)
    return f"{initial_slug}-{n}"
