# Shared fixtures. Living at the repo root also puts the root on sys.path,
# so tests can import `src.*` and `cli` without installing the package.
import io
import zipfile
from typing import Dict

import pytest
import requests


def _zip_bytes(files: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def make_zip():
    """Build zip bytes from {name: data}; names ending in '/' become directory entries."""
    return _zip_bytes


@pytest.fixture
def make_artifact():
    """Build an outer artifact zip holding package.zip with the given files."""
    def _make(files: Dict[str, bytes], extra: Dict[str, bytes] = None) -> bytes:
        outer = {"package.zip": _zip_bytes(files)}
        outer.update(extra or {})
        return _zip_bytes(outer)
    return _make


class FakeContext:
    log_stream_name = "2026/10/18/[$LATEST]abcdef"
    function_name = "site-deployment"


@pytest.fixture
def lambda_context():
    return FakeContext()


class FakeResponse:
    def __init__(self, status_code=200, text="ok"):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records PUT/POST calls instead of touching the network."""

    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.puts = []
        self.posts = []

    def put(self, url, data=None, headers=None, timeout=None):
        self.puts.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return FakeResponse(self.status_code)

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return FakeResponse(self.status_code)


@pytest.fixture
def http_session():
    return FakeSession()


@pytest.fixture
def session_factory():
    """FakeSession class, for tests that need an erroring or non-2xx session."""
    return FakeSession
