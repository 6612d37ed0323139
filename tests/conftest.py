import pytest

EXAMPLE_SECRET = "PASSKEYXXBASE32XXSECRETXXEXAMPLE"

ENV_VARS = ("PASSKEY_SECRET", "SECRET", "PASSKEY_INTERVAL", "INTERVAL", "PASSKEY_CONFIG")


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def example_secret():
    return EXAMPLE_SECRET


@pytest.fixture
def clock():
    # aligned to a 15s boundary
    return FakeClock(1_700_000_010.0)
