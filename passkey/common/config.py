# passkey/common/config.py
from __future__ import annotations
import os
import yaml
from passkey.common.secret import SECRET_TEXT_SIZE, SecretStore

DEFAULTS = {
    "secret": "",
    "secret_file": "",
    "interval_sec": 0,
    "header_key": "token",
    "log_dir": "",
    # server
    "listen_host": "127.0.0.1",
    "listen_port": 8080,
    # client
    "base_url": "http://127.0.0.1:8080",
    "path": "/hello",
    "timeout_sec": 15,
    "requests": 15,
}

def env_first(*names: str) -> str:
    for n in names:
        v = os.environ.get(n, "")
        if v:
            return v
    return ""

def load_cfg(path: str | None = None) -> dict:
    cfg = dict(DEFAULTS)
    path = path or os.environ.get("PASSKEY_CONFIG", "")
    if path:
        with open(path, "r") as f:
            cfg.update(yaml.safe_load(f) or {})

    secret = env_first("PASSKEY_SECRET", "SECRET")
    if secret:
        cfg["secret"] = secret
    interval = env_first("PASSKEY_INTERVAL", "INTERVAL")
    if interval:
        cfg["interval_sec"] = int(interval)
    return cfg

def read_secret_file(path: str) -> str:
    with open(os.path.expanduser(path), "r") as f:
        return f.read(SECRET_TEXT_SIZE).strip()

def secret_store(cfg: dict) -> SecretStore:
    """
    SecretStore from cfg["secret"], else cfg["secret_file"]; left at the
    sentinel when neither is set. Raises InvalidSecretError on bad text.
    """
    text = cfg.get("secret") or ""
    if not text and cfg.get("secret_file"):
        text = read_secret_file(cfg["secret_file"])
    if not text:
        return SecretStore()
    return SecretStore.from_text(text)
