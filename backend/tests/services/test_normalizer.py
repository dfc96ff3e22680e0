"""
Tests for article normalization and fallback image selection.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from newsbrief.db.base import utcnow
from newsbrief.services.images import (
    CATEGORY_FALLBACK_IMAGES,
    CATEGORY_IMAGE_POOLS,
    DEFAULT_IMAGE,
    DEFAULT_IMAGE_POOL,
    KEYWORD_POOLS,
    CategoryImageRotation,
    match_keyword_pool,
    pick_image_by_content,
)
from newsbrief.services.normalizer import (
    estimate_read_time,
    normalize_article,
    parse_published_at,
    resolve_category,
    resolve_image,
    resolve_source,
)

# Text that matches no keyword pool
NEUTRAL_TEXT = "Local bakery opens downtown"


def pool_images(name: str) -> list[str]:
    return next(list(pool.images) for pool in KEYWORD_POOLS if pool.name == name)


class TestResolveCategory:

    def test_explicit_category_wins(self):
        raw = {"category": "Science", "categories": ["health"]}

        assert resolve_category(raw, fallback="sports") == "science"

    def test_category_list_uses_first_element(self):
        assert resolve_category({"category": ["business", "top"]}) == "business"

    def test_categories_field(self):
        assert resolve_category({"categories": ["Health", "science"]}, fallback="sports") == "health"

    def test_caller_fallback(self):
        assert resolve_category({}, fallback="Sports") == "sports"

    def test_default_is_technology(self):
        assert resolve_category({"category": None, "categories": []}) == "technology"


class TestResolveSource:

    def test_object_source(self):
        assert resolve_source({"source": {"name": "Reuters", "id": "reuters"}}) == {
            "name": "Reuters",
            "id": "reuters",
        }

    def test_string_source(self):
        assert resolve_source({"source": "Tech News Today"}) == {"name": "Tech News Today", "id": ""}

    def test_object_without_id(self):
        assert resolve_source({"source": {"name": "Wire"}}) == {"name": "Wire", "id": ""}

    def test_flat_source_fields(self):
        assert resolve_source({"source_name": "BBC", "source_id": "bbc"}) == {"name": "BBC", "id": "bbc"}


class TestResolveImage:

    def test_field_priority(self):
        raw = {
            "urlToImage": "https://img.example.com/legacy.jpg",
            "imageUrl": "https://img.example.com/camel.jpg",
            "image_url": "https://img.example.com/snake.jpg",
        }

        assert resolve_image(raw, "technology") == "https://img.example.com/snake.jpg"

    def test_blank_field_is_skipped(self):
        raw = {"image_url": "  ", "urlToImage": "https://img.example.com/legacy.jpg"}

        assert resolve_image(raw, "technology") == "https://img.example.com/legacy.jpg"

    def test_keyword_pool_when_no_image(self):
        raw = {"title": "Quantum computer sets record", "description": ""}

        assert resolve_image(raw, "science", rng=random.Random(7)) in pool_images("quantum")

    def test_category_fallback_when_no_keyword(self):
        raw = {"title": NEUTRAL_TEXT, "description": ""}

        assert resolve_image(raw, "health") == CATEGORY_FALLBACK_IMAGES["health"]

    def test_generic_default(self):
        raw = {"title": NEUTRAL_TEXT}

        assert resolve_image(raw, "tourism") == DEFAULT_IMAGE


class TestImagePools:

    def test_keyword_match_is_case_insensitive(self):
        assert match_keyword_pool("NASA schedules launch").name == "space"

    def test_first_matching_pool_wins(self):
        # "quantum" and "health" both match; quantum is listed first
        assert match_keyword_pool("quantum sensors in hospital imaging").name == "quantum"

    def test_no_match(self):
        assert match_keyword_pool(NEUTRAL_TEXT) is None
        assert match_keyword_pool("") is None

    def test_pick_is_deterministic_with_seeded_rng(self):
        text = "Election results are in"

        first = pick_image_by_content(text, "politics", rng=random.Random(3))
        second = pick_image_by_content(text, "politics", rng=random.Random(3))

        assert first == second
        assert first in pool_images("politics")

    def test_rotation_cycles_per_category(self):
        rotation = CategoryImageRotation()
        pool = CATEGORY_IMAGE_POOLS["sports"]

        picks = [rotation.next_image("sports") for _ in range(len(pool) + 1)]

        assert picks[: len(pool)] == pool
        assert picks[-1] == pool[0]

    def test_rotation_counters_are_independent(self):
        rotation = CategoryImageRotation()

        rotation.next_image("business")
        assert rotation.next_image("health") == CATEGORY_IMAGE_POOLS["health"][0]

    def test_rotation_unknown_category_uses_default_pool(self):
        assert CategoryImageRotation().next_image("tourism") == DEFAULT_IMAGE_POOL[0]

    def test_rotation_prefers_keyword_pool(self):
        image = CategoryImageRotation().pick("Vaccine trial results", "science", rng=random.Random(1))

        assert image in pool_images("health")


class TestReadTime:

    @pytest.mark.parametrize(
        "text, minutes",
        [
            ("", 1),
            ("one two three", 1),
            (" ".join(["word"] * 200), 1),
            (" ".join(["word"] * 201), 2),
            (" ".join(["word"] * 450), 3),
        ],
    )
    def test_words_per_minute(self, text, minutes):
        assert estimate_read_time(text) == minutes

    def test_unparseable_defaults_to_five(self):
        assert estimate_read_time(None) == 5
        assert estimate_read_time(1234) == 5


class TestParsePublishedAt:

    def test_newsdata_format_is_utc(self):
        assert parse_published_at("2024-05-01 12:30:00") == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        assert parse_published_at("2024-05-01T12:30:00Z") == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_offset_is_converted(self):
        parsed = parse_published_at("2024-05-01T14:30:00+02:00")

        assert parsed == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("value", [None, "", "yesterday-ish", 42])
    def test_garbage_falls_back_to_now(self, value):
        parsed = parse_published_at(value)

        assert abs(utcnow() - parsed) < timedelta(seconds=5)


class TestNormalizeArticle:

    def test_provider_shape(self):
        fields = normalize_article(
            {
                "title": "Stocks rally",
                "description": "Markets climb on earnings.",
                "content": " ".join(["word"] * 250),
                "link": " https://news.example.com/rally ",
                "image_url": "https://img.example.com/rally.jpg",
                "source": {"name": "MarketWatch", "id": "marketwatch"},
                "category": ["business"],
                "publishedAt": "2024-05-01 12:30:00",
            }
        )

        assert fields == {
            "title": "Stocks rally",
            "description": "Markets climb on earnings.",
            "content": " ".join(["word"] * 250),
            "url": "https://news.example.com/rally",
            "image_url": "https://img.example.com/rally.jpg",
            "source_name": "MarketWatch",
            "source_id": "marketwatch",
            "category": "business",
            "published_at": datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
            "read_time": 2,
        }

    def test_defaults(self):
        fields = normalize_article({"title": NEUTRAL_TEXT, "url": "https://x.example.com/1"}, "sports")

        assert fields["description"] == ""
        assert fields["content"] is None
        assert fields["category"] == "sports"
        assert fields["image_url"] == CATEGORY_FALLBACK_IMAGES["sports"]
        assert fields["read_time"] == 1

    def test_read_time_from_description_when_no_content(self):
        fields = normalize_article(
            {"title": "T", "url": "https://x.example.com/2", "description": " ".join(["w"] * 401)}
        )

        assert fields["read_time"] == 3

    def test_explicit_read_time_is_kept(self):
        fields = normalize_article({"title": "T", "url": "https://x.example.com/3", "readTime": 7})

        assert fields["read_time"] == 7

    @pytest.mark.parametrize("bad", [0, -2, "4", True])
    def test_invalid_explicit_read_time_is_estimated(self, bad):
        fields = normalize_article({"title": "T", "url": "https://x.example.com/4", "readTime": bad})

        assert fields["read_time"] == 1
