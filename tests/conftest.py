# tests/conftest.py
"""
Shared pytest fixtures for the log feed tests.
"""

import logging

import pytest

from logfeed.services.feed import LogFeed

from .helpers import FakeGateway, make_rows

logging.basicConfig(level=logging.WARNING)
logging.getLogger("logfeed").setLevel(logging.DEBUG)


@pytest.fixture
def gateway():
    """Gateway holding 250 successful request logs."""
    return FakeGateway(make_rows(250), total_charge="250000")


@pytest.fixture
def feed(gateway):
    """Feed with small pages so paging is easy to observe."""
    return LogFeed(
        gateway.client(),
        page_size=100,
        poll_interval_seconds=0.01,
    )
