import pytest
from cryptography.fernet import Fernet

from buxfer_client.config import Settings


class FakeClient:
    """Records every post() and answers from a queue (or a callable)."""

    def __init__(self, responses=None, handler=None):
        self.calls: list[tuple[str, dict]] = []
        self._responses = list(responses or [])
        self._handler = handler
        self.closed = False

    def post(self, endpoint, form):
        self.calls.append((endpoint, dict(form)))
        if self._handler is not None:
            return self._handler(endpoint, dict(form))
        if not self._responses:
            raise AssertionError(f"unexpected request to {endpoint}")
        return self._responses.pop(0)

    def close(self):
        self.closed = True


class NoNetworkClient(FakeClient):
    def post(self, endpoint, form):
        raise AssertionError(f"network call to {endpoint} was not expected")


@pytest.fixture
def master_key() -> str:
    return Fernet.generate_key().decode()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, BUXFER_TOKEN=None, CACHE_DIR=tmp_path / "cache")
