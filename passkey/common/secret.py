# passkey/common/secret.py
import base64, binascii, secrets
from passkey.common.errors import InvalidSecretError, StartupError

SECRET_SIZE = 20
SECRET_TEXT_SIZE = 32
SENTINEL = bytes(SECRET_SIZE)

def random_secret() -> bytes:
    try:
        raw = secrets.token_bytes(SECRET_SIZE)
    except (OSError, NotImplementedError) as e:
        raise StartupError(f"cannot read random secret: {e}") from e
    if raw == SENTINEL:
        raise StartupError("randomness source returned an all-zero secret")
    return raw

def encode_secret(raw: bytes) -> str:
    return base64.b32encode(raw).decode("ascii")

def decode_secret(text: str) -> bytes:
    """
    Decode a 32-character base32 secret ([A-Z2-7]) into its 20 raw bytes.
    """
    if len(text) != SECRET_TEXT_SIZE:
        raise InvalidSecretError(f"secret must be {SECRET_TEXT_SIZE} base32 characters, got {len(text)}")
    try:
        raw = base64.b32decode(text)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretError(f"secret is not valid base32: {e}") from e
    if len(raw) != SECRET_SIZE:
        raise InvalidSecretError(f"secret must decode to {SECRET_SIZE} bytes, got {len(raw)}")
    return raw

class SecretStore:
    """
    Holds the shared secret of one session. Starts as the all-zero
    sentinel; set it once before the session starts.
    """

    def __init__(self, raw: bytes = SENTINEL):
        self._raw = SENTINEL
        if raw != SENTINEL:
            self.set_raw(raw)

    @classmethod
    def from_text(cls, text: str) -> "SecretStore":
        store = cls()
        store.set_text(text)
        return store

    def set_raw(self, raw: bytes) -> "SecretStore":
        if len(raw) != SECRET_SIZE:
            raise InvalidSecretError(f"raw secret must be {SECRET_SIZE} bytes, got {len(raw)}")
        self._raw = bytes(raw)
        return self

    def set_text(self, text: str) -> "SecretStore":
        self._raw = decode_secret(text)
        return self

    def is_sentinel(self) -> bool:
        return self._raw == SENTINEL

    def ensure(self) -> str | None:
        """
        Replace the sentinel with a random secret. Returns the new secret
        as text, or None when a secret was already set.
        """
        if not self.is_sentinel():
            return None
        self._raw = random_secret()
        return self.text

    @property
    def raw(self) -> bytes:
        return self._raw

    @property
    def text(self) -> str:
        return encode_secret(self._raw)
