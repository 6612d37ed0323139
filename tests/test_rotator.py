import hashlib
import hmac
import struct

import pytest

from passkey.common.errors import InvalidSecretError
from passkey.common.rotator import (
    CURRENT, NEXT, PREVIOUS, Window, current_code, current_token, derive,
    normalize_interval, time_bucket, window_at,
)
from passkey.common.codec import decode_token
from passkey.common.secret import SENTINEL, SecretStore


def reference_code(secret: bytes, bucket: int) -> int:
    digest = hmac.new(secret, bucket.to_bytes(8, "little"), hashlib.sha1).digest()
    start = (digest[19] & 0x0F) // 2 + 1
    return int.from_bytes(digest[start:start + 8], "little")


def test_time_bucket_offsets():
    assert time_bucket(15, PREVIOUS, 1003) == 975
    assert time_bucket(15, CURRENT, 1003) == 990
    assert time_bucket(15, NEXT, 1003) == 1005
    assert time_bucket(15, CURRENT, 990) == 990
    assert time_bucket(15, CURRENT, 1004.99) == 990


def test_derive_matches_reference(example_secret):
    raw = SecretStore.from_text(example_secret).raw
    for now in (30, 1_700_000_010, 1_700_000_024.5, 2_000_000_000):
        for slot in (PREVIOUS, CURRENT, NEXT):
            bucket = time_bucket(15, slot, now)
            assert derive(raw, 15, slot, now) == reference_code(raw, bucket)


def test_derive_is_deterministic(example_secret):
    raw = SecretStore.from_text(example_secret).raw
    first = derive(raw, 60, CURRENT, 1_700_000_000)
    assert all(derive(raw, 60, CURRENT, 1_700_000_000) == first for _ in range(5))
    # any instant inside the same bucket gives the same code
    assert derive(raw, 60, CURRENT, 1_700_000_019) == first


def test_slots_shift_by_one_interval(example_secret):
    raw = SecretStore.from_text(example_secret).raw
    now = 1_700_000_010
    assert derive(raw, 15, NEXT, now) == derive(raw, 15, CURRENT, now + 15)
    assert derive(raw, 15, PREVIOUS, now) == derive(raw, 15, CURRENT, now - 15)
    assert len({derive(raw, 15, s, now) for s in (PREVIOUS, CURRENT, NEXT)}) == 3


def test_derive_refuses_sentinel():
    with pytest.raises(InvalidSecretError):
        derive(SENTINEL, 60, CURRENT, 1_700_000_000)


@pytest.mark.parametrize("given,expected", [(None, 60), (0, 60), (15, 15), (3600, 3600)])
def test_normalize_interval(given, expected):
    assert normalize_interval(given) == expected


def test_normalize_interval_rejects_negative():
    with pytest.raises(ValueError):
        normalize_interval(-5)


def test_one_shot_current_code(example_secret):
    raw = SecretStore.from_text(example_secret).raw
    now = 1_700_000_010
    assert current_code(raw, 15, now) == derive(raw, 15, CURRENT, now)
    assert current_code(raw, None, now) == derive(raw, 60, CURRENT, now)
    assert decode_token(current_token(raw, 15, now)) == current_code(raw, 15, now)


def test_empty_window_matches_nothing():
    w = Window()
    assert not w.contains(0)
    w.current.store(7, 990)
    assert w.contains(7)
    assert not w.contains(0)
    assert [v.name for v in w.views()] == ["previous", "current", "next"]
    assert [v.populated for v in w.views()] == [False, True, False]


@pytest.mark.parametrize("given", [0.5, 1.9, 14.5])
def test_normalize_interval_rejects_fractions(given):
    with pytest.raises(ValueError):
        normalize_interval(given)


def test_normalize_interval_accepts_whole_floats():
    assert normalize_interval(15.0) == 15


def test_window_at_fills_every_slot(example_secret):
    raw = SecretStore.from_text(example_secret).raw
    now = 1_700_000_010
    views = window_at(raw, 15, now).views()
    assert [v.name for v in views] == ["previous", "current", "next"]
    assert [v.bucket for v in views] == [now - 15, now, now + 15]
    assert [v.code for v in views] == [derive(raw, 15, s, now) for s in (PREVIOUS, CURRENT, NEXT)]
