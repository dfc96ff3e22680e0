"""
Fallback image selection for articles the provider sent without an image.

Resolution order (after any provider-supplied image field):
1. Keyword pools: the article's title + description is matched against
   topic keyword lists; the first matching pool supplies a random image
2. Category fallback: one fixed image per category
3. Generic default

The keyword choice is random on purpose (thumbnails vary across similar
stories), so callers and tests should only rely on pool membership.
"""

import random
from dataclasses import dataclass
from itertools import count
from typing import Dict, Iterator, List, Optional, Sequence

_UNSPLASH = "https://images.unsplash.com/{photo}?auto=format&fit=crop&w=1200&q=80"


def _img(photo: str) -> str:
    return _UNSPLASH.format(photo=photo)


@dataclass(frozen=True)
class KeywordPool:
    """A topic: keywords that identify it and the images that illustrate it."""

    name: str
    keywords: Sequence[str]
    images: Sequence[str]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


KEYWORD_POOLS: List[KeywordPool] = [
    KeywordPool(
        name="ai",
        keywords=("ai", "artificial intelligence", "chatgpt", "gpt", "openai", "deepmind", "model",
                  "ml", "machine learning", "neural network", "deep learning"),
        images=(
            _img("photo-1677442136019-21780ecad995"),
            _img("photo-1504384308090-c894fdcc538d"),
            _img("photo-1517245386807-bb43f82c33c4"),
            _img("photo-1655393001768-d946c97d6fd1"),
        ),
    ),
    KeywordPool(
        name="quantum",
        keywords=("quantum", "qubit", "superconduct", "entangle", "quantum computing"),
        images=(
            _img("photo-1635070041078-e363dbe005cb"),
            _img("photo-1529257414772-1960b7bea4eb"),
            _img("photo-1639762681485-074b7f938ba0"),
        ),
    ),
    KeywordPool(
        name="space",
        keywords=("space", "nasa", "mars", "moon", "orbit", "rocket", "satellite", "astronaut",
                  "spacex", "telescope", "galaxy", "universe"),
        images=(
            _img("photo-1446776811953-b23d57bd21aa"),
            _img("photo-1454789548928-9efd52dc4031"),
            _img("photo-1516849841032-87cbac4d88f7"),
            _img("photo-1614728894747-a83421e2b9c9"),
        ),
    ),
    KeywordPool(
        name="climate",
        keywords=("climate", "environment", "rainforest", "biodiversity", "sustainability",
                  "renewable", "solar", "wind energy", "carbon", "emission", "global warming", "eco"),
        images=(
            _img("photo-1501004318641-b39e6451bec6"),
            _img("photo-1500530855697-b586d89ba3ee"),
            _img("photo-1569163139394-de4798aa62b6"),
            _img("photo-1466611653911-95081537e5b7"),
        ),
    ),
    KeywordPool(
        name="health",
        keywords=("health", "hospital", "cancer", "vaccine", "medical", "doctor", "nurse", "surgery",
                  "treatment", "drug", "pharmaceutical", "disease", "pandemic", "covid"),
        images=(
            _img("photo-1582719478248-54e9f2af90b6"),
            _img("photo-1579154204601-01588f351e67"),
            _img("photo-1576091160550-2173dba999ef"),
            _img("photo-1505751172876-fa1923c5c528"),
        ),
    ),
    KeywordPool(
        name="finance",
        keywords=("finance", "market", "stocks", "earnings", "rally", "wall street", "trading",
                  "investment", "bank", "cryptocurrency", "bitcoin", "economy", "inflation"),
        images=(
            _img("photo-1434626881859-194d67b2b86f"),
            _img("photo-1520607162513-77705c0f0d4a"),
            _img("photo-1460925895917-afdab827c52f"),
            _img("photo-1611974789855-9c2a0a7236a3"),
        ),
    ),
    KeywordPool(
        name="sports",
        keywords=("sports", "championship", "match", "tournament", "football", "soccer", "basketball",
                  "baseball", "olympics", "athlete", "win", "game", "player"),
        images=(
            _img("photo-1508609349937-5ec4ae374ebf"),
            _img("photo-1509223197845-458d87318791"),
            _img("photo-1461896836934-ffe607ba8211"),
            _img("photo-1579952363873-27f3bade9f55"),
        ),
    ),
    KeywordPool(
        name="entertainment",
        keywords=("movie", "film", "music", "entertainment", "festival", "concert", "album", "actor",
                  "actress", "cinema", "streaming", "netflix", "spotify"),
        images=(
            _img("photo-1489515217757-5fd1be406fef"),
            _img("photo-1521737604893-d14cc237f11d"),
            _img("photo-1533613220915-609f6a6a7bca"),
            _img("photo-1598488035139-bdbb2231ce04"),
        ),
    ),
    KeywordPool(
        name="mobile",
        keywords=("smartphone", "iphone", "android", "app", "mobile", "tech gadget", "device"),
        images=(
            _img("photo-1511707171634-5f897ff02aa9"),
            _img("photo-1512941937669-90a1b58e7e9c"),
            _img("photo-1592899677977-9c10ca588bbd"),
        ),
    ),
    KeywordPool(
        name="security",
        keywords=("cybersecurity", "hack", "breach", "data leak", "ransomware", "security", "privacy"),
        images=(
            _img("photo-1550751827-4bd374c3f58b"),
            _img("photo-1563986768494-4dee2763ff3f"),
            _img("photo-1526374965328-7f61d4dc18c5"),
        ),
    ),
    KeywordPool(
        name="automotive",
        keywords=("electric vehicle", "ev", "tesla", "automotive", "car", "autonomous", "self-driving"),
        images=(
            _img("photo-1593941707882-a5bba14938c7"),
            _img("photo-1617469767053-d3b523a0b982"),
            _img("photo-1549399542-7e3f8b79c341"),
        ),
    ),
    KeywordPool(
        name="politics",
        keywords=("election", "voting", "politics", "government", "president", "congress", "senate",
                  "policy"),
        images=(
            _img("photo-1529107386315-e1a2ed48a620"),
            _img("photo-1520454974743-201d305911eb"),
            _img("photo-1541872703-74c5e44368f9"),
        ),
    ),
    KeywordPool(
        name="conflict",
        keywords=("war", "military", "conflict", "defense", "army", "navy", "weapon"),
        images=(
            _img("photo-1436262513933-a0b06755c784"),
            _img("photo-1522097969174-3c5b7531aba6"),
        ),
    ),
    KeywordPool(
        name="education",
        keywords=("education", "school", "university", "college", "student", "learning", "teacher"),
        images=(
            _img("photo-1523050854058-8df90110c9f1"),
            _img("photo-1503676260728-1c00da094a0b"),
            _img("photo-1427504494785-3a9ca7044f45"),
        ),
    ),
    KeywordPool(
        name="food",
        keywords=("food", "restaurant", "chef", "cooking", "recipe", "culinary"),
        images=(
            _img("photo-1476224203421-9ac39bcb3327"),
            _img("photo-1504674900247-0877df9cc836"),
            _img("photo-1414235077428-338989a2e8c0"),
        ),
    ),
]

CATEGORY_FALLBACK_IMAGES: Dict[str, str] = {
    "technology": _img("photo-1677442136019-21780ecad995"),
    "science": _img("photo-1507525428034-b723cf961d3e"),
    "health": _img("photo-1576091160550-2173dba999ef"),
    "business": _img("photo-1460925895917-afdab827c52f"),
    "entertainment": _img("photo-1533613220915-609f6a6a7bca"),
    "sports": _img("photo-1508609349937-5ec4ae374ebf"),
    "environment": _img("photo-1569163139394-de4798aa62b6"),
    "politics": _img("photo-1529107386315-e1a2ed48a620"),
}

DEFAULT_IMAGE = CATEGORY_FALLBACK_IMAGES["technology"]

# Several images per category, rotated by the backfill job so a page of
# same-category articles doesn't show one thumbnail over and over
CATEGORY_IMAGE_POOLS: Dict[str, List[str]] = {
    "technology": [
        _img("photo-1677442136019-21780ecad995"),
        _img("photo-1518770660439-4636190af475"),
        _img("photo-1526379095098-d400fd0bf935"),
    ],
    "science": [
        _img("photo-1507525428034-b723cf961d3e"),
        _img("photo-1500530855697-b586d89ba3ee"),
        _img("photo-1470165518754-609cab407e47"),
    ],
    "health": [
        _img("photo-1576091160550-2173dba999ef"),
        _img("photo-1505751172876-fa1923c5c528"),
        _img("photo-1506126613408-eca07ce68773"),
    ],
    "business": [
        _img("photo-1460925895917-afdab827c52f"),
        _img("photo-1520607162513-77705c0f0d4a"),
        _img("photo-1508387025002-73f3c6a45d5c"),
    ],
    "entertainment": [
        _img("photo-1533613220915-609f6a6a7bca"),
        _img("photo-1521737604893-d14cc237f11d"),
        _img("photo-1489515217757-5fd1be406fef"),
    ],
    "sports": [
        _img("photo-1461896836934-ffe607ba8211"),
        _img("photo-1508609349937-5ec4ae374ebf"),
        _img("photo-1499028344343-cd173ffc68a9"),
    ],
    "environment": [
        _img("photo-1569163139394-de4798aa62b6"),
        _img("photo-1501004318641-b39e6451bec6"),
        _img("photo-1500382017468-9049fed747ef"),
    ],
    "politics": [
        _img("photo-1529107386315-e1a2ed48a620"),
        _img("photo-1520454974743-201d305911eb"),
        _img("photo-1526304640581-d334cdbbf45e"),
    ],
}

DEFAULT_IMAGE_POOL: List[str] = [
    _img("photo-1500530855697-b586d89ba3ee"),
    _img("photo-1501004318641-b39e6451bec6"),
    _img("photo-1520607162513-77705c0f0d4a"),
]

# Single-image category defaults handed out before keyword pools existed.
# The backfill job treats these as "no real image".
LEGACY_DEFAULT_IMAGES = frozenset({
    _img("photo-1677442136019-21780ecad995"),
    _img("photo-1507525428034-b723cf961d3e"),
    _img("photo-1576091160550-2173dba999ef"),
    _img("photo-1460925895917-afdab827c52f"),
    _img("photo-1533613220915-609f6a6a7bca"),
    _img("photo-1461896836934-ffe607ba8211"),
    _img("photo-1569163139394-de4798aa62b6"),
    _img("photo-1529107386315-e1a2ed48a620"),
})


def match_keyword_pool(text: str) -> Optional[KeywordPool]:
    """Return the first pool whose keywords occur in ``text`` (case-insensitive)."""
    normalized = (text or "").lower()
    for pool in KEYWORD_POOLS:
        if pool.matches(normalized):
            return pool
    return None


def category_fallback_image(category: Optional[str]) -> str:
    return CATEGORY_FALLBACK_IMAGES.get((category or "").lower(), DEFAULT_IMAGE)


def pick_image_by_content(
    text: str,
    category: Optional[str],
    rng: Optional[random.Random] = None,
) -> str:
    """
    Pick a fallback image for an article.

    Args:
        text: Title and description of the article
        category: Resolved category, used when no keyword pool matches
        rng: Random source (module-level ``random`` when omitted)
    """
    pool = match_keyword_pool(text)
    if pool is not None:
        return (rng or random).choice(list(pool.images))
    return category_fallback_image(category)


class CategoryImageRotation:
    """Hands out category images round-robin, one counter per category."""

    def __init__(self) -> None:
        self._counters: Dict[str, Iterator[int]] = {}

    def next_image(self, category: Optional[str]) -> str:
        key = (category or "").lower()
        pool = CATEGORY_IMAGE_POOLS.get(key, DEFAULT_IMAGE_POOL)
        counter = self._counters.setdefault(key, count())
        return pool[next(counter) % len(pool)]

    def pick(self, text: str, category: Optional[str], rng: Optional[random.Random] = None) -> str:
        """Keyword pool for ``text`` if one matches, else the next category image."""
        pool = match_keyword_pool(text)
        if pool is not None:
            return (rng or random).choice(list(pool.images))
        return self.next_image(category)
