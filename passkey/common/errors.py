# passkey/common/errors.py

class PassKeyError(Exception):
    pass

class InvalidSecretError(PassKeyError, ValueError):
    """
    Secret text does not decode to exactly 20 bytes, raw key has the wrong
    length, or a code was requested from the all-zero sentinel secret.
    """

class MalformedTokenError(PassKeyError, ValueError):
    """
    Transport token is not base32 or does not decode to 10 bytes.
    """

class StartupError(PassKeyError, RuntimeError):
    """
    Session could not start; the randomness source failed.
    """
