# passkey/client/client.py
import asyncio, logging
from typing import Generator
import httpx
from passkey.common.codec import encode_token
from passkey.common.scheduler import RotationScheduler
from passkey.common.secret import SecretStore

DEFAULT_HEADER_KEY = "token"

class PassKeyClient:
    """
    Issuing side of a session: keeps its own rotating window and stamps the
    current code on outgoing requests.
    """

    def __init__(self, store: SecretStore, interval: float | None = None,
                 header_key: str | None = None, stop: asyncio.Event | None = None,
                 clock=None, logger=None):
        self.logger = logger or logging.getLogger("passkey")
        self.scheduler = RotationScheduler(store, interval, stop=stop, clock=clock, logger=self.logger)
        self.header_key = header_key or DEFAULT_HEADER_KEY

    def start(self) -> asyncio.Task:
        return self.scheduler.start()

    def stop(self):
        self.scheduler.stop()

    def token(self) -> str:
        return encode_token(self.scheduler.window.current.load())

    def headers(self) -> dict:
        return {self.header_key: self.token()}

    def set_header(self, req: httpx.Request) -> httpx.Request:
        req.headers[self.header_key] = self.token()
        return req

    @property
    def auth(self) -> "PassKeyAuth":
        return PassKeyAuth(self)

class PassKeyAuth(httpx.Auth):
    def __init__(self, client: PassKeyClient):
        self.client = client

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield self.client.set_header(request)
