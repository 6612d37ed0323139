# passkey/client/cli.py
from __future__ import annotations
import argparse, os, sys, time
from rich.console import Console
from rich.table import Table
from passkey.common.codec import encode_token
from passkey.common.config import env_first, read_secret_file
from passkey.common.errors import InvalidSecretError
from passkey.common.rotator import current_token, normalize_interval, window_at
from passkey.common.secret import SecretStore
from passkey.common.util import human_ts, short_code

console = Console()

SECRET_FILE = "~/.pkgen"

def resolve_secret(args) -> str:
    secret = env_first("PASSKEY_SECRET", "SECRET")
    if not secret and not args.secret:
        path = os.path.expanduser(SECRET_FILE)
        if os.path.exists(path):
            secret = read_secret_file(path)
    if not secret and args.secret:
        secret = args.secret
    return secret

def resolve_interval(args) -> int:
    raw = env_first("PASSKEY_INTERVAL", "INTERVAL")
    sec = int(raw) if raw else 0
    if not sec and args.seconds:
        sec = args.seconds
    return normalize_interval(sec)

def show_window(secret: bytes, interval: int, now: float):
    t = Table(title=f"PassKey window ({interval}s)")
    t.add_column("Slot")
    t.add_column("Bucket")
    t.add_column("Code")
    t.add_column("Token")
    for v in window_at(secret, interval, now).views():
        t.add_row(v.name, human_ts(v.bucket), short_code(v.code), encode_token(v.code))
    console.print(t)

def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="pkgen",
        description="emit a new shared secret, or a current token for a secret",
    )
    ap.add_argument("secret", nargs="?", help="32-character base32 shared secret")
    ap.add_argument("seconds", nargs="?", type=int, default=0, help="rotation interval; default 60")
    ap.add_argument("--window", action="store_true", help="show previous/current/next codes")

    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0].lstrip("-") == "help":
        ap.print_help()
        return
    args = ap.parse_args(argv)

    try:
        interval = resolve_interval(args)
    except ValueError as e:
        console.print(f"[red]invalid interval:[/red] {e}")
        sys.exit(1)

    text = resolve_secret(args)
    if not text:
        store = SecretStore()
        console.print(store.ensure(), highlight=False)
        return

    try:
        store = SecretStore.from_text(text)
    except InvalidSecretError as e:
        console.print(f"[red]invalid secret:[/red] {e}")
        sys.exit(1)

    now = time.time()
    if args.window:
        show_window(store.raw, interval, now)
        return
    console.print(current_token(store.raw, interval, now), highlight=False)

if __name__ == "__main__":
    main()
