import base64
import logging

from fastapi.testclient import TestClient

from passkey.common.codec import encode_token
from passkey.common.secret import SecretStore
from passkey.server.api import PassKeyServer, build_server_app

logger = logging.getLogger("passkey-test")


def make_app(store, header_key=None, announce=print):
    server = PassKeyServer(store, interval=15, header_key=header_key, logger=logger)
    return server, build_server_app(server, logger, announce=announce)


def test_root_and_health_are_open(example_secret):
    server, app = make_app(SecretStore.from_text(example_secret))
    with TestClient(app) as c:
        r = c.get("/")
        assert r.status_code == 200
        assert r.text == "try /hello"
        assert c.get("/health").json() == {"ok": True, "state": "RUNNING"}
    assert server.scheduler.state == "STOPPED"


def test_hello_requires_live_token(example_secret):
    server, app = make_app(SecretStore.from_text(example_secret))
    with TestClient(app) as c:
        assert c.get("/hello").status_code == 400
        assert c.get("/hello", headers={"token": "garbage"}).status_code == 400

        nine = base64.b32encode(b"\x07" * 9).decode()
        assert c.get("/hello", headers={"token": nine}).status_code == 400

        stale = encode_token(12345)
        assert c.get("/hello", headers={"token": stale}).status_code == 401

        live = encode_token(server.scheduler.window.current.load())
        r = c.get("/hello", headers={"token": live})
        assert r.status_code == 200
        assert r.text == "Hello!"

        upcoming = encode_token(server.scheduler.window.next.load())
        assert c.get("/hello", headers={"token": upcoming}).status_code == 200


def test_custom_header_key(example_secret):
    server, app = make_app(SecretStore.from_text(example_secret), header_key="x-passkey")
    with TestClient(app) as c:
        live = encode_token(server.scheduler.window.current.load())
        assert c.get("/hello", headers={"token": live}).status_code == 400
        assert c.get("/hello", headers={"x-passkey": live}).status_code == 200


def test_generated_secret_is_announced_once():
    shown = []
    server, app = make_app(SecretStore(), announce=shown.append)
    with TestClient(app) as c:
        assert c.get("/").status_code == 200
    assert len(shown) == 1
    assert shown[0] == server.scheduler.store.text
    assert len(shown[0]) == 32


def test_configured_secret_is_not_announced(example_secret):
    shown = []
    _, app = make_app(SecretStore.from_text(example_secret), announce=shown.append)
    with TestClient(app):
        pass
    assert shown == []
