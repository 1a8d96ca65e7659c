"""
Pytest configuration and shared fixtures for the channel analytics test suite.

Provides data factories for content items and channels, an isolated
settings instance, and the fixed reference dates the scenarios use.
"""

import os
from datetime import datetime, timezone
from typing import Optional

import pytest

# Keep ambient environment out of the settings used by tests
for _key in [k for k in os.environ if k.startswith("ANALYTICS_")]:
    del os.environ[_key]

from analytics.config import Settings
from analytics.engine.orchestrator import KPIEngine
from analytics.models.channels import Channel, ContentItem


UTC = timezone.utc


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Timezone-aware UTC datetime shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Model factories, shared by all test suites
# ---------------------------------------------------------------------------


def make_item(
    published_at: Optional[datetime] = None,
    views: Optional[int] = 100,
    likes: Optional[int] = 0,
    comments: Optional[int] = 0,
    **overrides,
) -> ContentItem:
    """Factory function for creating test ContentItem objects."""
    defaults = dict(
        item_id=f"vid_{views}_{likes}_{comments}",
        title="Test video",
        published_at=published_at or utc(2024, 5, 15),
        views=views,
        likes=likes,
        comments=comments,
    )
    defaults.update(overrides)
    return ContentItem(**defaults)


def make_channel(
    channel_id: str = "UC_test",
    items: Optional[list[ContentItem]] = None,
    subscribers: Optional[int] = 1000,
    **overrides,
) -> Channel:
    """Factory function for creating test Channel objects."""
    defaults = dict(
        channel_id=channel_id,
        channel_name=f"Channel {channel_id}",
        subscribers=subscribers,
        items=items or [],
    )
    defaults.update(overrides)
    return Channel(**defaults)


def make_raw_channel(
    channel_id: str = "UC_raw",
    subscribers="1500",
    videos: Optional[list[dict]] = None,
    **overrides,
) -> dict:
    """Factory for raw channel JSON records as produced by the stats exporter."""
    raw = {
        "channel_id": channel_id,
        "channel_name": f"Raw {channel_id}",
        "description": "Lo-fi beats to study to",
        "style": "lofi",
        "emoji": "🎧",
        "emojis": "🎧🌙",
        "thumbnails": {"default": {"url": f"https://img.example/{channel_id}.jpg"}},
        "subscribers": subscribers,
        "total_views": "250000",
        "total_videos": "42",
        "created_at": "2019-03-01T00:00:00Z",
        "videos": videos if videos is not None else [],
    }
    raw.update(overrides)
    return raw


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def reference_date() -> datetime:
    """Start of June 2024, the 'M' of the end-to-end scenario."""
    return utc(2024, 6, 1)


@pytest.fixture
def scenario_channel() -> Channel:
    """
    Items at M-3 (100, 200, 300), M-2 (50) and M-1 (400) with M = June 2024.
    """
    return make_channel(
        channel_id="UC_scenario",
        items=[
            make_item(utc(2024, 3, 5), views=100, likes=10, comments=1),
            make_item(utc(2024, 3, 12), views=200, likes=20, comments=2),
            make_item(utc(2024, 3, 20), views=300, likes=30, comments=3),
            make_item(utc(2024, 4, 10), views=50, likes=5, comments=0),
            make_item(utc(2024, 5, 10), views=400, likes=40, comments=4),
        ],
    )


@pytest.fixture
def engine(reference_date, settings) -> KPIEngine:
    """Engine anchored to the scenario reference date."""
    return KPIEngine(reference_date, settings=settings)
