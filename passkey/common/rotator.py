# passkey/common/rotator.py
from __future__ import annotations
import hmac, hashlib, struct, threading, time
from dataclasses import dataclass, field
from passkey.common.codec import encode_token, CODE_MASK
from passkey.common.errors import InvalidSecretError
from passkey.common.models import SLOT_NAMES, SlotName, SlotView
from passkey.common.secret import SENTINEL

DEFAULT_INTERVAL = 60

PREVIOUS, CURRENT, NEXT = 0, 1, 2

def normalize_interval(interval: float | None) -> int:
    """
    Whole seconds, at least 1; None or 0 means the 60s default.
    """
    if not interval:
        return DEFAULT_INTERVAL
    if interval < 1 or interval != int(interval):
        raise ValueError(f"interval must be a positive whole number of seconds, got {interval}")
    return int(interval)

def time_bucket(interval: int, slot: int, now: float) -> int:
    """
    Interval-aligned unix time of the bucket for `slot`, where slot 0 is one
    interval behind `now`, 1 is the bucket holding `now` and 2 is one ahead.
    """
    return (int(now) // interval) * interval + (slot - 1) * interval

def derive(secret: bytes, interval: int, slot: int, now: float) -> int:
    if secret == SENTINEL:
        raise InvalidSecretError("refusing to derive a code from the zero secret")

    msg = struct.pack("<Q", time_bucket(interval, slot, now) & CODE_MASK)
    digest = hmac.new(secret, msg, hashlib.sha1).digest()

    # offset is in [1, 8] so the 8-byte read stays inside the 20-byte digest
    offset = ((digest[19] & 0xF) // 2) + 1
    return struct.unpack_from("<Q", digest, offset)[0]

def current_code(secret: bytes, interval: float | None = None, now: float | None = None) -> int:
    """
    One-shot query for the current code, without a scheduler.
    """
    if now is None:
        now = time.time()
    return derive(secret, normalize_interval(interval), CURRENT, now)

def current_token(secret: bytes, interval: float | None = None, now: float | None = None) -> str:
    return encode_token(current_code(secret, interval, now))

class Slot:
    """
    One independently atomic 64-bit cell. Zero means empty.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0
        self.bucket = 0

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int, bucket: int = 0):
        with self._lock:
            self._value = value
            self.bucket = bucket

    def snapshot(self) -> tuple[int, int]:
        with self._lock:
            return self._value, self.bucket

@dataclass
class Window:
    """
    previous/current/next codes of one session. Each slot is atomic on its
    own; the window as a whole is not, so a reader may see a half-rotated
    window. Every value it can observe is still a live code.
    """
    previous: Slot = field(default_factory=Slot)
    current: Slot = field(default_factory=Slot)
    next: Slot = field(default_factory=Slot)

    def slot(self, name: SlotName) -> Slot:
        return getattr(self, name)

    def clear(self):
        for name in SLOT_NAMES:
            self.slot(name).store(0)

    def contains(self, code: int) -> bool:
        want = struct.pack("<Q", code & CODE_MASK)
        found = False
        # newest first: codes move next -> current -> previous, so a single
        # rotation racing this loop cannot carry a live code past the reader
        for name in reversed(SLOT_NAMES):
            have = self.slot(name).load()
            # an empty slot never matches, not even a presented zero
            if have and hmac.compare_digest(want, struct.pack("<Q", have)):
                found = True
        return found

    def views(self) -> list[SlotView]:
        out = []
        for name in SLOT_NAMES:
            code, bucket = self.slot(name).snapshot()
            out.append(SlotView(name=name, bucket=bucket, code=code))
        return out

def window_at(secret: bytes, interval: float | None = None, now: float | None = None) -> Window:
    """
    All three slots derived for `now`, without a scheduler.
    """
    if now is None:
        now = time.time()
    interval = normalize_interval(interval)
    w = Window()
    for slot, name in enumerate(SLOT_NAMES):
        w.slot(name).store(derive(secret, interval, slot, now), time_bucket(interval, slot, now))
    return w
