"""Shared test fixtures.

  sample_csv  : a small generated HR CSV file in a temp directory.
  config      : PipelineConfig pointing at temp CSV and database paths.
  loaded_db   : config whose table has already been loaded from sample_csv.
  fake_get    : replaces requests.get in the extractor with a canned response.
"""
import logging

import pytest
import requests

from sqlite_etl.config import PipelineConfig
from sqlite_etl.data_generator import write_sample_csv
from sqlite_etl.load import load

SAMPLE_ROWS = 20


class FakeSampler:
    """Returns the given memory readings in order, repeating the last one."""

    def __init__(self, *readings):
        self.readings = list(readings)

    def sample_kb(self):
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


class FakeResponse:
    def __init__(self, body=b"", status_code=200, fail_after=None):
        self.body = body
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            if self.fail_after is not None and start >= self.fail_after:
                raise requests.ConnectionError("Connection reset by peer")
            yield self.body[start:start + chunk_size]

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers installed by setup_logger() during a test."""
    yield
    logger = logging.getLogger("sqlite_etl")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_csv(tmp_path):
    return write_sample_csv(str(tmp_path / "HR_1.csv"), SAMPLE_ROWS, seed=7)


@pytest.fixture
def config(tmp_path, sample_csv):
    return PipelineConfig(
        url="https://example.test/HR_1.csv",
        file_path=sample_csv,
        db_path=str(tmp_path / "HR_1.db"),
    )


@pytest.fixture
def loaded_db(config):
    load(config.file_path, config.database, config.query.table)
    return config


@pytest.fixture
def fake_get(monkeypatch):
    """Install a fake requests.get; call with a FakeResponse or an exception."""
    calls = []

    def install(outcome):
        def fake(url, timeout=None, stream=False):
            calls.append({"url": url, "timeout": timeout})
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        monkeypatch.setattr("sqlite_etl.extract.requests.get", fake)
        return calls

    return install
