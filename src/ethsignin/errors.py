"""Errors raised while parsing, validating and verifying SIWE messages."""

from enum import Enum
from typing import Any, Iterable, Optional


class SiweErrorType(str, Enum):
    """Kinds of failure, valued with their human-readable description."""

    EXPIRED_MESSAGE = "Expired message."
    INVALID_DOMAIN = "Invalid domain."
    DOMAIN_MISMATCH = "Domain does not match provided domain for verification."
    NONCE_MISMATCH = "Nonce does not match provided nonce for verification."
    INVALID_ADDRESS = "Invalid address."
    INVALID_URI = "URI does not conform to RFC 3986."
    INVALID_NONCE = "Nonce size smaller than 8 characters or is not alphanumeric."
    NOT_YET_VALID_MESSAGE = "Message is not valid yet."
    INVALID_SIGNATURE = "Signature does not match address of the message."
    INVALID_TIME_FORMAT = "Invalid time format."
    INVALID_MESSAGE_VERSION = "Invalid message version."
    INVALID_STATEMENT = "Statement must be a single line."
    INVALID_PARAMS = "Invalid verification parameters."
    UNABLE_TO_PARSE = "Unable to parse the message."

    def __str__(self):
        return self.value


class SiweError(Exception):
    """Top-level exception, carrying the expected and received values."""

    error_type: SiweErrorType = SiweErrorType.UNABLE_TO_PARSE

    def __init__(self, expected: Any = None, received: Any = None):
        """Construct the exception from the expected and received values."""
        self.expected = expected
        self.received = received
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = [str(self.error_type)]
        if self.expected is not None:
            parts.append(f"Expected: {self.expected}.")
        if self.received is not None:
            parts.append(f"Received: {self.received}.")
        return " ".join(parts)


class InvalidMessage(SiweError):
    """A field of the message breaks its format rules."""

    pass


class InvalidDomain(InvalidMessage):
    """The domain is empty or not an authority."""

    error_type = SiweErrorType.INVALID_DOMAIN


class InvalidAddress(InvalidMessage):
    """The address is not EIP-55 checksummed."""

    error_type = SiweErrorType.INVALID_ADDRESS


class InvalidURI(InvalidMessage):
    error_type = SiweErrorType.INVALID_URI


class InvalidMessageVersion(InvalidMessage):
    error_type = SiweErrorType.INVALID_MESSAGE_VERSION


class InvalidNonce(InvalidMessage):
    error_type = SiweErrorType.INVALID_NONCE


class InvalidTimeFormat(InvalidMessage):
    """A timestamp is not a valid ISO-8601 date-time."""

    error_type = SiweErrorType.INVALID_TIME_FORMAT


class InvalidStatement(InvalidMessage):
    error_type = SiweErrorType.INVALID_STATEMENT


class UnableToParse(SiweError):
    """The input could not be read as an EIP-4361 message."""

    def __init__(
        self,
        expected: Any = None,
        received: Any = None,
        *,
        line: Optional[int] = None,
        field: Optional[str] = None,
    ):
        """Construct the exception, optionally locating the failing line."""
        self.line = line
        self.field = field
        super().__init__(expected, received)

    def _describe(self) -> str:
        description = super()._describe()
        if self.line is not None:
            description = f"{description} (line {self.line}, field `{self.field}`)"
        return description


class MalformedSession(UnableToParse):
    """A message could not be constructed as it is missing certain fields."""

    def __init__(self, missing_fields: Iterable[str], received: Any = None):
        """Construct the exception with the missing fields."""
        self.missing_fields = list(missing_fields)
        super().__init__(", ".join(self.missing_fields), received)


class VerificationError(SiweError):
    """Top-level verification exception."""

    pass


class InvalidParams(VerificationError):
    """Verification was called with unknown parameter or option keys."""

    error_type = SiweErrorType.INVALID_PARAMS


class DomainMismatch(VerificationError):
    """The message does not contain the expected domain."""

    error_type = SiweErrorType.DOMAIN_MISMATCH


class NonceMismatch(VerificationError):
    """The message does not contain the expected nonce."""

    error_type = SiweErrorType.NONCE_MISMATCH


class ExpiredMessage(VerificationError):
    """The message is not valid any more."""

    error_type = SiweErrorType.EXPIRED_MESSAGE


class NotYetValidMessage(VerificationError):
    """The message is not yet valid."""

    error_type = SiweErrorType.NOT_YET_VALID_MESSAGE


class InvalidSignature(VerificationError):
    """The signature does not match the message."""

    error_type = SiweErrorType.INVALID_SIGNATURE


class AddressMismatch(InvalidSignature):
    """The address recovered from the signature is not the message address."""

    error_type = SiweErrorType.INVALID_ADDRESS
