"""Errors raised by the signing protocols."""


class ProtocolError(Exception):
    """Base class for every error raised by a protocol step."""

    default_message = "protocol error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidKey(ProtocolError):
    """A key, ciphertext or proof supplied by the other party is not valid."""

    default_message = "invalid key"


class InvalidSig(ProtocolError):
    """A signature does not verify."""

    default_message = "invalid signature"