from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.repo_builder import FakeRunner, RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture(autouse=True)
def _reset_kaeter_logger() -> Iterator[None]:
    # configure_logging detaches the package logger from the root logger,
    # which would hide records from caplog in later tests.
    yield
    logger = logging.getLogger("kaeter_ci")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
