"""Tests for the download step."""
import os
from types import SimpleNamespace

import pytest
import requests

from sqlite_etl.errors import FileWriteError, NetworkError
from sqlite_etl.extract import extract

from conftest import FakeResponse

URL = "https://example.test/HR_1.csv"
BODY = b"EmployeeNumber,Age\n1,30\n2,41\n"


def leftover_temp_files(directory):
    return [name for name in os.listdir(directory) if name.startswith(".download-")]


def test_extract_writes_destination(tmp_path, fake_get):
    calls = fake_get(FakeResponse(BODY))
    destination = tmp_path / "HR_1.csv"

    result = extract(URL, str(destination), timeout=10)

    assert result == str(destination)
    assert destination.read_bytes() == BODY
    assert calls == [{"url": URL, "timeout": 10}]
    assert leftover_temp_files(tmp_path) == []


def test_extract_overwrites_existing_file(tmp_path, fake_get):
    destination = tmp_path / "HR_1.csv"
    destination.write_bytes(b"old contents that are longer than the new body" * 10)
    fake_get(FakeResponse(BODY))

    extract(URL, str(destination), timeout=10)

    assert destination.read_bytes() == BODY


def test_extract_creates_missing_directory(tmp_path, fake_get):
    fake_get(FakeResponse(BODY))
    destination = tmp_path / "data" / "raw" / "HR_1.csv"

    extract(URL, str(destination), timeout=5)

    assert destination.read_bytes() == BODY


@pytest.mark.parametrize("timeout", [0, -1])
def test_extract_non_positive_timeout_fails_without_request(tmp_path, fake_get, timeout):
    calls = fake_get(FakeResponse(BODY))
    destination = tmp_path / "HR_1.csv"

    with pytest.raises(NetworkError):
        extract(URL, str(destination), timeout=timeout)

    assert calls == []
    assert not destination.exists()


def test_extract_unreachable_url_raises_network_error(tmp_path, fake_get):
    fake_get(requests.ConnectionError("Failed to establish a new connection"))
    destination = tmp_path / "HR_1.csv"

    with pytest.raises(NetworkError, match="Failed to establish"):
        extract(URL, str(destination), timeout=10)

    assert not destination.exists()


def test_extract_timeout_raises_network_error(tmp_path, fake_get):
    fake_get(requests.Timeout("Read timed out"))

    with pytest.raises(NetworkError):
        extract(URL, str(tmp_path / "HR_1.csv"), timeout=1)


def test_extract_http_error_keeps_previous_download(tmp_path, fake_get):
    destination = tmp_path / "HR_1.csv"
    destination.write_bytes(BODY)
    fake_get(FakeResponse(b"Not Found", status_code=404))

    with pytest.raises(NetworkError, match="404"):
        extract(URL, str(destination), timeout=10)

    assert destination.read_bytes() == BODY


def test_extract_interrupted_download_leaves_no_partial_file(tmp_path, fake_get):
    destination = tmp_path / "HR_1.csv"
    destination.write_bytes(b"previous")
    body = b"x" * (200 * 1024)
    response = FakeResponse(body, fail_after=64 * 1024)
    fake_get(response)

    with pytest.raises(NetworkError, match="interrupted"):
        extract(URL, str(destination), timeout=10)

    assert destination.read_bytes() == b"previous"
    assert leftover_temp_files(tmp_path) == []
    assert response.closed


def test_extract_write_failure_raises_file_write_error(tmp_path, fake_get):
    # A directory in place of the destination cannot be replaced by a file
    destination = tmp_path / "HR_1.csv"
    destination.mkdir()
    fake_get(FakeResponse(BODY))

    with pytest.raises(FileWriteError):
        extract(URL, str(destination), timeout=10)

    assert destination.is_dir()
    assert leftover_temp_files(tmp_path) == []


def test_extract_slow_download_past_timeout_raises_network_error(tmp_path, fake_get, monkeypatch):
    # Each reading of the clock advances six seconds, so the second chunk
    # arrives after the ten second deadline.
    readings = iter(range(100, 1000, 6))
    monkeypatch.setattr("sqlite_etl.extract.time", SimpleNamespace(monotonic=lambda: next(readings)))
    destination = tmp_path / "HR_1.csv"
    destination.write_bytes(b"previous")
    response = FakeResponse(b"x" * (3 * 64 * 1024))
    fake_get(response)

    with pytest.raises(NetworkError, match="exceeded 10s"):
        extract(URL, str(destination), timeout=10)

    assert destination.read_bytes() == b"previous"
    assert leftover_temp_files(tmp_path) == []
    assert response.closed


def test_extract_within_timeout_succeeds_with_patched_clock(tmp_path, fake_get, monkeypatch):
    monkeypatch.setattr("sqlite_etl.extract.time", SimpleNamespace(monotonic=lambda: 100.0))
    fake_get(FakeResponse(BODY))
    destination = tmp_path / "HR_1.csv"

    extract(URL, str(destination), timeout=1)

    assert destination.read_bytes() == BODY
