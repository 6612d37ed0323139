# passkey/common/util.py
from __future__ import annotations
import time

def human_ts(ts: float) -> str:
    if not ts:
        return "-"
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))

def short_code(code: int) -> str:
    if not code:
        return "-"
    return f"{code:016x}"
