"""Field validators and helpers shared by the parser, the model and the verifier."""

import math
import secrets
import string
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Union

from eth_utils import keccak
from pydantic import AnyUrl, TypeAdapter, ValidationError

from .defs import ADDRESS_HEX, INTEGER, ISO8601, NONCE_CHARS
from .errors import InvalidTimeFormat, UnableToParse

NONCE_ENTROPY_BITS = 96
MIN_NONCE_LENGTH = 8

_ALPHANUMERICS = string.ascii_letters + string.digits

# NOTE: Only used to check the syntax, the original uri string is never replaced
# https://github.com/pydantic/pydantic/issues/7186#issuecomment-1874338146
AnyUrlTypeAdapter = TypeAdapter(AnyUrl)


def generate_nonce(entropy_bits: int = NONCE_ENTROPY_BITS) -> str:
    """Generate a cryptographically sound alphanumeric nonce.

    96 bits balances size and security for the lifespan of a sign-in request.

    :param entropy_bits: Minimum entropy the nonce must carry.
    :return: A random token drawn from ``[a-zA-Z0-9]``.
    """
    length = math.ceil(entropy_bits / math.log2(len(_ALPHANUMERICS)))
    nonce = "".join(secrets.choice(_ALPHANUMERICS) for _ in range(length))
    if len(nonce) < MIN_NONCE_LENGTH:
        raise RuntimeError("Error during nonce creation.")
    return nonce


def to_checksum_address(address: str) -> str:
    """Re-case an address following EIP-55."""
    lower_address = address.lower()
    if lower_address.startswith("0x"):
        lower_address = lower_address[2:]
    digest = keccak(text=lower_address).hex()
    return "0x" + "".join(
        char.upper() if int(nibble, 16) >= 8 else char
        for char, nibble in zip(lower_address, digest)
    )


def is_eip55_address(address: str) -> bool:
    """Check that an address is hex and already in its EIP-55 casing."""
    if len(address) != 42 or not ADDRESS_HEX.fullmatch(address):
        return False
    return address == to_checksum_address(address)


def is_valid_domain(domain: str) -> bool:
    """An RFC 3986 authority can contain neither `#` nor `?`."""
    return bool(domain) and "#" not in domain and "?" not in domain


def is_valid_nonce(nonce: str) -> bool:
    match = NONCE_CHARS.fullmatch(nonce)
    return match is not None and match.group(0) == nonce


def is_valid_uri(uri: str) -> bool:
    """Delegate RFC 3986 syntax checking to pydantic."""
    try:
        AnyUrlTypeAdapter.validate_python(uri)
    except ValidationError:
        return False
    return True


def is_valid_iso8601_date(value: str) -> bool:
    """Match against the ISO-8601 grammar and reject impossible calendar days.

    The regex alone accepts e.g. ``2021-02-30``; rebuilding the date portion
    through :class:`datetime.date` catches those.
    """
    match = ISO8601.fullmatch(value)
    if match is None:
        return False
    try:
        parsed = date.fromisoformat(match.group("date"))
    except ValueError:
        return False
    return parsed.isoformat() == match.group("date")


def parse_iso8601(value: str) -> datetime:
    """Convert an ISO-8601 Datetime string into an aware datetime object.

    A leap second (``60``) is clamped to ``59`` and fractions are truncated to
    microseconds.
    """
    if not is_valid_iso8601_date(value):
        raise InvalidTimeFormat("an ISO-8601 date-time", value)
    match = ISO8601.fullmatch(value)

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    if match.group("offset") in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        offset = timedelta(
            hours=int(match.group("offset_hour")),
            minutes=int(match.group("offset_minute")),
        )
        tzinfo = timezone(-offset if match.group("sign") == "-" else offset)

    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        min(int(match.group("second")), 59),
        int(fraction),
        tzinfo=tzinfo,
    )


def format_iso8601(dt: datetime, timespec: str = "milliseconds") -> str:
    """Create an ISO-8601 formatted UTC string from a datetime object."""
    return as_utc(dt).isoformat(timespec=timespec).replace("+00:00", "Z")


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz=timezone.utc)


def utc_now() -> datetime:
    """Get the current datetime as UTC timezone."""
    return datetime.now(tz=timezone.utc)


def parse_integer(value: Union[str, float, int]) -> int:
    """Parse a chain id from its textual form.

    Anything but base-10 digits (including ``nan`` and ``inf``) is rejected.
    """
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise UnableToParse("a finite integer", value)
        return int(value)
    if isinstance(value, str):
        if not INTEGER.fullmatch(value):
            raise UnableToParse("a base-10 integer", value)
        return int(value)
    return value


def check_invalid_keys(obj: Mapping[str, Any], keys: Iterable[str]) -> List[str]:
    """List the keys of `obj` that are not part of the allowed `keys`."""
    allowed = set(keys)
    return [key for key in obj if key not in allowed]
