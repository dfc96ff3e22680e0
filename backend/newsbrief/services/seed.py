"""
First-boot seeding of the articles table.

Runs at startup when SEED_ON_STARTUP is set and the table is empty: live
headlines from the provider when a key is configured, otherwise (or when
the provider returns nothing) a fixed set of demo articles.
"""

from datetime import timedelta
from typing import Any

from newsbrief.core.errors import UpstreamError
from newsbrief.core.logging import get_logger
from newsbrief.db.base import utcnow
from newsbrief.services.news_provider import NewsProviderClient
from newsbrief.services.normalizer import count_articles, upsert_batch

logger = get_logger(__name__)


def seed_articles() -> list[dict[str, Any]]:
    """Demo articles in raw shape, published one to eight days ago."""
    now = utcnow()

    def days_ago(days: int) -> str:
        return (now - timedelta(days=days)).isoformat()

    return [
        {
            "title": "AI Breakthroughs: New Model Achieves Human-Level Performance",
            "description": "Researchers announce a revolutionary AI model that matches human performance on complex tasks.",
            "content": "A team of AI researchers has unveiled a groundbreaking model that demonstrates human-level "
                       "performance across multiple domains. The breakthrough could have significant implications "
                       "for industries ranging from healthcare to finance.",
            "url": "https://example.com/ai-breakthrough-1",
            "imageUrl": "https://images.unsplash.com/photo-1677442136019-21780ecad995?w=600",
            "source": {"name": "AI Research Daily", "id": "ai-research"},
            "category": "technology",
            "publishedAt": days_ago(2),
            "readTime": 8,
        },
        {
            "title": "Quantum Computing Milestone: New Record Set",
            "description": "Scientists achieve quantum advantage in solving practical problems.",
            "content": "In a major breakthrough for quantum computing, researchers have successfully demonstrated "
                       "quantum advantage on a real-world problem, marking a significant milestone in the field.",
            "url": "https://example.com/quantum-1",
            "imageUrl": "https://images.unsplash.com/photo-1635070041078-e3c3136db3f0?w=600",
            "source": {"name": "Science Weekly", "id": "science-weekly"},
            "category": "technology",
            "publishedAt": days_ago(3),
            "readTime": 6,
        },
        {
            "title": "New Species Discovered in Amazon Rainforest",
            "description": "Scientists uncover a previously unknown species during rainforest expedition.",
            "content": "An international team of scientists has discovered a new species of tree frog in the Amazon "
                       "rainforest, expanding our understanding of biodiversity in the region.",
            "url": "https://example.com/species-1",
            "imageUrl": "https://images.unsplash.com/photo-1580620773945-8871235ba48c?w=600",
            "source": {"name": "Nature News", "id": "nature-news"},
            "category": "science",
            "publishedAt": days_ago(1),
            "readTime": 5,
        },
        {
            "title": "Breakthrough in Cancer Treatment Shows Promise",
            "description": "New immunotherapy approach demonstrates significant improvement in patient outcomes.",
            "content": "A new immunotherapy treatment has shown remarkable results in clinical trials, with patients "
                       "experiencing significantly improved survival rates and quality of life.",
            "url": "https://example.com/cancer-1",
            "imageUrl": "https://images.unsplash.com/photo-1631217314831-c6227db76b6e?w=600",
            "source": {"name": "Medical Today", "id": "medical-today"},
            "category": "health",
            "publishedAt": days_ago(4),
            "readTime": 7,
        },
        {
            "title": "Tech Giants Announce New Partnership",
            "description": "Two major technology companies join forces on ambitious new project.",
            "content": "In a surprising announcement, two leading technology companies have announced a strategic "
                       "partnership to develop next-generation technologies that could reshape the industry.",
            "url": "https://example.com/partnership-1",
            "imageUrl": "https://images.unsplash.com/photo-1552664730-d307ca884978?w=600",
            "source": {"name": "Tech Crunch", "id": "techcrunch"},
            "category": "business",
            "publishedAt": days_ago(5),
            "readTime": 4,
        },
        {
            "title": "Climate Change Report: Urgent Action Required",
            "description": "Latest UN report highlights critical need for immediate climate action.",
            "content": "A comprehensive UN report on climate change emphasizes the urgency of implementing immediate "
                       "and substantial measures to mitigate global warming and its impacts.",
            "url": "https://example.com/climate-1",
            "imageUrl": "https://images.unsplash.com/photo-1559027615-cd2628902d4a?w=600",
            "source": {"name": "Environment News", "id": "env-news"},
            "category": "science",
            "publishedAt": days_ago(6),
            "readTime": 9,
        },
        {
            "title": "Sports: Historic Victory at International Championships",
            "description": "Underdog team claims unexpected victory in major sporting event.",
            "content": "In an exciting upset at the international championships, an underdog team has claimed a "
                       "historic victory, defeating the defending champions in a thrilling final match.",
            "url": "https://example.com/sports-1",
            "imageUrl": "https://images.unsplash.com/photo-1517836357463-d25ddfcbf042?w=600",
            "source": {"name": "Sports Daily", "id": "sports-daily"},
            "category": "sports",
            "publishedAt": days_ago(7),
            "readTime": 5,
        },
        {
            "title": "Entertainment: New Blockbuster Film Breaks Records",
            "description": "Latest superhero film becomes highest-grossing opening weekend.",
            "content": "A newly released superhero film has shattered box office records, achieving the "
                       "highest-grossing opening weekend in cinema history and exceeding all industry expectations.",
            "url": "https://example.com/entertainment-1",
            "imageUrl": "https://images.unsplash.com/photo-1533613220915-609f6a6a7bca?w=600",
            "source": {"name": "Entertainment Weekly", "id": "entertainment-weekly"},
            "category": "entertainment",
            "publishedAt": days_ago(8),
            "readTime": 3,
        },
    ]


async def seed_database(db, provider: NewsProviderClient) -> int:
    """
    Fill an empty articles table.

    Returns:
        Number of articles inserted (0 when the table already had rows)
    """
    existing = await count_articles(db)
    if existing > 0:
        logger.info("seed_skipped", existing=existing)
        return 0

    if provider.configured:
        try:
            raw = await provider.fetch_headlines()
        except UpstreamError as e:
            logger.warning("seed_provider_unavailable", error=e.message)
            raw = []
        if raw:
            inserted = await upsert_batch(db, raw)
            if inserted:
                logger.info("seed_completed", source="provider", count=len(inserted))
                return len(inserted)

    inserted = await upsert_batch(db, seed_articles())
    logger.info("seed_completed", source="builtin", count=len(inserted))
    return len(inserted)
