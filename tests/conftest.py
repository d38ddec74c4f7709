import gzip
import json

import pytest
from amplitude_mcp.core.client import AmplitudeClient
from amplitude_mcp.core.config import Credentials

BASE_URL = "https://amplitude.com"


@pytest.fixture
def credentials():
    return Credentials(api_key="mock-key", secret_key="mock-secret")


@pytest.fixture
def client(credentials):
    return AmplitudeClient(credentials=credentials, base_url=BASE_URL)


def _gzip_ndjson(*records) -> bytes:
    lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
    return gzip.compress(("\n".join(lines) + "\n").encode("utf-8"))


@pytest.fixture
def gzip_ndjson():
    """Gzip one JSON object per line; str items are written verbatim."""
    return _gzip_ndjson
