# passkey/common/codec.py
import base64, binascii, secrets, struct
from passkey.common.errors import MalformedTokenError, StartupError

TOKEN_SIZE = 10
PAD_SIZE = 2
CODE_MASK = 0xFFFF_FFFF_FFFF_FFFF

def _padding() -> bytes:
    try:
        return secrets.token_bytes(PAD_SIZE)
    except (OSError, NotImplementedError) as e:
        raise StartupError(f"cannot read random padding: {e}") from e

def encode_token(code: int) -> str:
    """
    Little-endian code followed by two random bytes, base32 encoded.
    The padding changes on every call, so the same code never encodes
    to the same string twice in a row (barring a 1/65536 collision).
    """
    buf = struct.pack("<Q", code & CODE_MASK) + _padding()
    return base64.b32encode(buf).decode("ascii")

def decode_token(token: str) -> int:
    try:
        buf = base64.b32decode(token)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"token is not valid base32: {e}") from e
    if len(buf) != TOKEN_SIZE:
        raise MalformedTokenError(f"token must decode to {TOKEN_SIZE} bytes, got {len(buf)}")
    # trailing padding bytes are ignored
    return struct.unpack_from("<Q", buf)[0]
