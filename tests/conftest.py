# ABOUTME: Shared test fixtures for atom2opml.
# ABOUTME: Provides sample Atom documents and isolated settings.

import pytest

from atom2opml.config import Settings, get_settings

EXAMPLE_ATOM = """\
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Feed</title>
  <link rel="self" href="https://example.com/feed.atom"/>
  <entry><title>Post 1</title></entry>
</feed>
"""

EXAMPLE_OPML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<opml version="1.0"><head><title>Example Feed</title></head><body>'
    '<outline text="Example Feed" title="Example Feed" '
    'xmlUrl="https://example.com/feed.atom" type="rss" /></body></opml>'
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with small limits for tests."""
    return Settings(fetch_timeout=5, fetch_user_agent="atom2opml-test", max_feed_bytes=4096)


@pytest.fixture
def example_atom() -> str:
    return EXAMPLE_ATOM


@pytest.fixture
def example_opml() -> str:
    return EXAMPLE_OPML
