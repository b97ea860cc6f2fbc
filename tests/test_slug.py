from __future__ import annotations

import random
import re
from datetime import datetime, timedelta, timezone

import pytest

from flowblog.utils.dates import format_display_date
from flowblog.utils.slug import make_slug, slugify_title, with_random_suffix

MARCH_5 = datetime(2024, 3, 5, 12, 0, 0)


def test_example_title_strips_punctuation_and_emoji() -> None:
    assert make_slug("Hello, World! 🎉", MARCH_5) == "Hello-World-05-03-2024"


@pytest.mark.parametrize("title", ["!!!", "🎉🎉", "$ € £ ¥ ₩ ₹", "", "   ", "---"])
def test_title_without_permitted_chars_gives_bare_date(title: str) -> None:
    assert make_slug(title, MARCH_5) == "-05-03-2024"


@pytest.mark.parametrize(
    "title",
    [
        "  --Hello   --  World--  ",
        "tab\tseparated\nand newline",
        "a_b c",
        "Price: $5 € only",
        "I ❤️ Python",
        "What?! Really... yes",
        "日本語 タイトル",
    ],
)
def test_slug_shape(title: str) -> None:
    slug = make_slug(title, MARCH_5)
    assert not re.search(r"\s", slug)
    assert "--" not in slug
    assert not slug.startswith("-")
    assert not slug.endswith("-")
    assert slug.endswith("-05-03-2024")


def test_unicode_letters_are_kept() -> None:
    assert make_slug("日本語 タイトル", MARCH_5) == "日本語-タイトル-05-03-2024"
    assert make_slug("Привет мир", MARCH_5) == "Привет-мир-05-03-2024"


def test_combining_marks_stay_with_their_letter() -> None:
    assert slugify_title("Café au lait") == "Café-au-lait"


def test_emoji_variation_selector_is_dropped() -> None:
    assert slugify_title("I ❤️ Python") == "I-Python"


def test_underscore_and_symbols_removed() -> None:
    assert slugify_title("a_b c") == "ab-c"
    assert slugify_title("Price: $5 € only") == "Price-5-only"


def test_date_is_zero_padded() -> None:
    assert make_slug("x", datetime(2023, 1, 2)) == "x-02-01-2023"


def test_aware_timestamp_uses_utc_day() -> None:
    late_evening = datetime(2024, 3, 5, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
    assert make_slug("x", late_evening) == "x-06-03-2024"
    assert format_display_date(late_evening) == "March 6, 2024"


def test_display_date_matches_slug_day() -> None:
    assert format_display_date(MARCH_5) == "March 5, 2024"


def test_deterministic() -> None:
    assert make_slug("Same Title", MARCH_5) == make_slug("Same Title", MARCH_5)


def test_random_suffix_is_two_digits() -> None:
    rng = random.Random(1234)
    for _ in range(200):
        slug = with_random_suffix("Hello-05-03-2024", rng)
        m = re.fullmatch(r"Hello-05-03-2024-(\d{2})", slug)
        assert m is not None
        assert 10 <= int(m.group(1)) <= 99
