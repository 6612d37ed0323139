# passkey/server/validator.py
import logging
from passkey.common.codec import decode_token
from passkey.common.errors import MalformedTokenError
from passkey.common.models import ValidationOutcome
from passkey.common.rotator import Window

class Validator:
    """
    Checks presented tokens against a live window. Transport agnostic.
    """

    def __init__(self, window: Window, logger=None):
        self.window = window
        self.logger = logger or logging.getLogger("passkey")

    def check(self, token: str | None) -> ValidationOutcome:
        if not token:
            return "malformed"
        try:
            code = decode_token(token)
        except MalformedTokenError as e:
            self.logger.info(f"malformed token: {e}")
            return "malformed"

        if self.window.contains(code):
            return "ok"
        self.logger.info("token not in live window")
        return "unauthorized"

    def is_valid(self, token: str | None) -> bool:
        return self.check(token) == "ok"
