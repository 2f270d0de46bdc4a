"""Shared fixtures for worker and pool tests."""

import pytest

from crew.workers import Worker


@pytest.fixture
def make_worker(launcher, mock_logger, uids):
    """Factory fixture to create Workers wired to the fake launcher."""

    def _make(path: str = "job.py", **kwargs) -> Worker:
        return Worker(path, launcher=launcher, logger=mock_logger, uids=uids, **kwargs)

    return _make
