# passkey/server/api.py
import asyncio, logging
from contextlib import asynccontextmanager
from typing import Callable
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from passkey.common.scheduler import RotationScheduler
from passkey.common.secret import SecretStore
from passkey.server.validator import Validator

DEFAULT_HEADER_KEY = "token"

class PassKeyServer:
    """
    Validating side of a session: a rotation scheduler plus a validator
    reading its window.
    """

    def __init__(self, store: SecretStore, interval: float | None = None,
                 header_key: str | None = None, stop: asyncio.Event | None = None,
                 clock=None, logger=None):
        self.logger = logger or logging.getLogger("passkey")
        self.scheduler = RotationScheduler(store, interval, stop=stop, clock=clock, logger=self.logger)
        self.validator = Validator(self.scheduler.window, self.logger)
        self.header_key = header_key or DEFAULT_HEADER_KEY

    def start(self) -> asyncio.Task:
        return self.scheduler.start()

    def stop(self):
        self.scheduler.stop()

    def check(self, token: str | None):
        return self.validator.check(token)

def passkey_guard(server: PassKeyServer) -> Callable:
    """
    FastAPI dependency: 400 on a missing or malformed header, 401 when the
    token is not live, otherwise the route runs untouched.
    """

    def auth(req: Request):
        outcome = server.check(req.headers.get(server.header_key))
        if outcome == "malformed":
            raise HTTPException(400, "bad request")
        if outcome == "unauthorized":
            raise HTTPException(401, "unauthorized")

    return auth

def build_server_app(server: PassKeyServer, logger, announce: Callable[[str], None] = print):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = server.start()
        secret = server.scheduler.generated_secret
        if secret:
            # shown once; the operator copies it to the clients
            announce(secret)
        try:
            yield
        finally:
            server.stop()
            await task

    app = FastAPI(lifespan=lifespan)
    guard = passkey_guard(server)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        logger.info("got / request")
        return "try /hello"

    @app.get("/hello", response_class=PlainTextResponse, dependencies=[Depends(guard)])
    async def hello():
        logger.info("got /hello request")
        return "Hello!"

    @app.get("/health")
    async def health():
        return {"ok": True, "state": server.scheduler.state}

    return app
