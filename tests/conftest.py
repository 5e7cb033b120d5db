"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.yml"


@pytest.fixture
def newsletters():
    from tests.fakes.fake_page_fetcher import make_newsletters

    return make_newsletters(45)


@pytest.fixture
def fetcher(newsletters):
    from tests.fakes.fake_page_fetcher import FakePageFetcher

    return FakePageFetcher(newsletters)


@pytest.fixture
def scheduler():
    from tests.fakes.fake_scheduler import FakeScheduler

    return FakeScheduler()


@pytest.fixture
def observer_factory():
    from tests.fakes.fake_observer import FakeObserverFactory

    return FakeObserverFactory()
