"""Main module for SIWE messages construction, validation and verification."""

import logging
import warnings
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from eth_typing import ChecksumAddress
from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    ValidationError,
    field_validator,
    model_validator,
)
from typing_extensions import TypedDict
from web3 import HTTPProvider, Web3

from .defs import ADDRESS_HEX
from .errors import (
    AddressMismatch,
    DomainMismatch,
    ExpiredMessage,
    InvalidAddress,
    InvalidDomain,
    InvalidMessageVersion,
    InvalidNonce,
    InvalidParams,
    InvalidStatement,
    InvalidTimeFormat,
    InvalidURI,
    MalformedSession,
    NonceMismatch,
    NotYetValidMessage,
    SiweError,
    UnableToParse,
)
from .parsed import ABNFParsedMessage, RegExpParsedMessage
from .recovery import (
    EthAccountRecovery,
    RecoveryError,
    Signature,
    SignatureRecovery,
    check_contract_wallet_signature,
)
from .utils import (
    as_utc,
    check_invalid_keys,
    format_iso8601,
    generate_nonce,
    is_eip55_address,
    is_valid_domain,
    is_valid_iso8601_date,
    is_valid_nonce,
    is_valid_uri,
    parse_integer,
    parse_iso8601,
    to_checksum_address,
    utc_now,
)

logger = logging.getLogger(__name__)

VERSION = "1"

VERIFY_PARAMS_KEYS = ("signature", "domain", "nonce", "time")
VERIFY_OPTS_KEYS = ("suppress_exceptions", "provider", "recovery")

_default_recovery = EthAccountRecovery()


class VerifyParams(TypedDict, total=False):
    """What a signature is checked against."""

    signature: Signature
    domain: str
    nonce: str
    time: Union[datetime, str]


class VerifyOpts(TypedDict, total=False):
    """How verification behaves."""

    suppress_exceptions: bool
    provider: HTTPProvider
    recovery: SignatureRecovery


class SiweMessage(BaseModel):
    """A Sign-in with Ethereum (EIP-4361) message."""

    model_config = ConfigDict(extra="forbid")

    domain: str
    """RFC 4501 dns authority that is requesting the signing."""
    address: ChecksumAddress
    """Ethereum address performing the signing conformant to capitalization encoded
    checksum specified in EIP-55 where applicable.
    """
    uri: str
    """RFC 3986 URI referring to the resource that is the subject of the signing."""
    version: str
    """Current version of the message."""
    chain_id: NonNegativeInt = 1
    """EIP-155 Chain ID to which the session is bound, and the network where Contract
    Accounts must be resolved.
    """
    nonce: Optional[str] = None
    """Randomized token used to prevent replay attacks, at least 8 alphanumeric
    characters. Generated on construction when absent; store it for verification
    later.
    """
    issued_at: Optional[str] = None
    """ISO 8601 datetime string of the current time, filled in on serialization
    when absent.
    """
    statement: Optional[str] = None
    """Human-readable ASCII assertion that the user will sign, and it must not contain
    `\n`.
    """
    expiration_time: Optional[str] = None
    """ISO 8601 datetime string that, if present, indicates when the signed
    authentication message is no longer valid.
    """
    not_before: Optional[str] = None
    """ISO 8601 datetime string that, if present, indicates when the signed
    authentication message will become valid.
    """
    request_id: Optional[str] = None
    """System-specific identifier that may be used to uniquely refer to the sign-in
    request.
    """
    resources: Optional[List[str]] = None
    """List of information or references to information the user wishes to have resolved
    as part of authentication by the relying party. They are expressed as RFC 3986 URIs
    separated by `\n- `.
    """

    @field_validator("chain_id", mode="before")
    @classmethod
    def chain_id_from_text(cls, v: Any) -> Any:
        """Parse chain ids given as text, an absent one means mainnet."""
        if v is None:
            return 1
        return parse_integer(v)

    @model_validator(mode="after")
    def nonce_and_fields_are_valid(self) -> "SiweMessage":
        """Default the nonce, then run the full-object validation."""
        if not self.nonce:
            self.nonce = generate_nonce()
        self.validate_message()
        return self

    @classmethod
    def from_message(cls, message: str, abnf: bool = True) -> "SiweMessage":
        """Parse a message in its EIP-4361 format."""
        if abnf:
            parsed_message = ABNFParsedMessage(message=message)
        else:
            parsed_message = RegExpParsedMessage(message=message)

        return cls.from_fields(parsed_message.__dict__)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "SiweMessage":
        """Build a message from its fields.

        :raises MalformedSession: if fields are missing, unknown or of the wrong
        type.
        :raises InvalidMessage: if a field breaks its format rules.
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            raise MalformedSession(
                [".".join(str(loc) for loc in error["loc"]) for error in e.errors()],
                received=sorted(fields),
            ) from e

    def validate_message(self, *args) -> None:
        """Check every field, raising on the first one that is invalid.

        Fields are checked in a fixed order: domain, address, uri, version, nonce,
        statement, resources, then the timestamps.
        """
        if args:
            raise UnableToParse(
                "no arguments", "Unexpected argument in the validate_message function."
            )

        if not is_valid_domain(self.domain):
            raise InvalidDomain("a non-empty authority without `#` or `?`", self.domain)

        if not is_eip55_address(self.address):
            expected = (
                to_checksum_address(self.address)
                if ADDRESS_HEX.fullmatch(self.address)
                else "a 0x-prefixed address of 40 hex digits"
            )
            raise InvalidAddress(expected, self.address)

        if not is_valid_uri(self.uri):
            raise InvalidURI("a valid RFC 3986 URI", self.uri)

        if self.version != VERSION:
            raise InvalidMessageVersion(VERSION, self.version)

        if not self.nonce or not is_valid_nonce(self.nonce):
            raise InvalidNonce("at least 8 alphanumeric characters", self.nonce)

        if self.statement is not None and (
            "\n" in self.statement or "\r" in self.statement
        ):
            raise InvalidStatement("no line breaks", self.statement)

        for resource in self.resources or []:
            if not is_valid_uri(resource):
                raise InvalidURI("a valid RFC 3986 URI", resource)

        for value in (self.issued_at, self.expiration_time, self.not_before):
            if value and not is_valid_iso8601_date(value):
                raise InvalidTimeFormat("an ISO-8601 date-time", value)

    def prepare_message(self) -> str:
        """Serialize to the EIP-4361 format for signing.

        It can then be passed to an EIP-191 signing function. A missing `nonce` or
        `issued_at` is filled in first, so serializing twice gives the same text.

        :return: EIP-4361 formatted message, ready for EIP-191 signing.
        """
        if not self.nonce:
            self.nonce = generate_nonce()
        if not self.issued_at:
            self.issued_at = format_iso8601(utc_now())
        self.validate_message()

        header = f"{self.domain} wants you to sign in with your Ethereum account:"

        uri_field = f"URI: {self.uri}"

        prefix = "\n".join([header, self.address])

        version_field = f"Version: {self.version}"

        chain_field = f"Chain ID: {self.chain_id or 1}"

        nonce_field = f"Nonce: {self.nonce}"

        suffix_array = [uri_field, version_field, chain_field, nonce_field]

        issued_at_field = f"Issued At: {self.issued_at}"
        suffix_array.append(issued_at_field)

        if self.expiration_time:
            expiration_time_field = f"Expiration Time: {self.expiration_time}"
            suffix_array.append(expiration_time_field)

        if self.not_before:
            not_before_field = f"Not Before: {self.not_before}"
            suffix_array.append(not_before_field)

        if self.request_id is not None:
            request_id_field = f"Request ID: {self.request_id}"
            suffix_array.append(request_id_field)

        if self.resources is not None:
            resources_field = "\n".join(
                ["Resources:"] + [f"- {resource}" for resource in self.resources]
            )
            suffix_array.append(resources_field)

        suffix = "\n".join(suffix_array)

        if self.statement:
            prefix = "\n\n".join([prefix, self.statement])
        else:
            prefix += "\n"

        return "\n\n".join([prefix, suffix])

    def verify(
        self,
        params: VerifyParams,
        opts: Optional[VerifyOpts] = None,
    ) -> "VerifyResult":
        """Verify the validity of the message and its signature.

        :param params: `signature` to check against the current message, and
        optionally the `domain` and `nonce` expected in it and the `time` used to
        check the expiry and not-before dates (now by default).
        :param opts: `suppress_exceptions` to return failures instead of raising
        them; a web3 `provider` to fall back on EIP-1271 for Smart Contract
        Wallets; a `recovery` object replacing the default `eth_account` one.
        :return: A successful `VerifyResult`, or a failed one when exceptions are
        suppressed.
        :raises VerificationError: on the first failing check, unless suppressed.
        :raises InvalidMessage: if the message fields are no longer valid.
        """
        opts = {} if opts is None else opts
        suppress_exceptions = bool(opts.get("suppress_exceptions", False))

        def fail(error: SiweError) -> "VerifyResult":
            logger.debug("Verification of %s failed: %s", self.address, error)
            if suppress_exceptions:
                return VerifyResult(success=False, data=self, error=error)
            raise error

        invalid_params = check_invalid_keys(params, VERIFY_PARAMS_KEYS)
        if invalid_params:
            return fail(
                InvalidParams(
                    f"keys among {', '.join(VERIFY_PARAMS_KEYS)}",
                    f"{', '.join(invalid_params)} is/are not valid key(s) for "
                    "VerifyParams",
                )
            )
        invalid_opts = check_invalid_keys(opts, VERIFY_OPTS_KEYS)
        if invalid_opts:
            return fail(
                InvalidParams(
                    f"keys among {', '.join(VERIFY_OPTS_KEYS)}",
                    f"{', '.join(invalid_opts)} is/are not valid key(s) for "
                    "VerifyOpts",
                )
            )

        self.validate_message()

        domain = params.get("domain")
        if domain is not None and domain != self.domain:
            return fail(DomainMismatch(domain, self.domain))

        nonce = params.get("nonce")
        if nonce is not None and nonce != self.nonce:
            return fail(NonceMismatch(nonce, self.nonce))

        time = params.get("time")
        if time is None:
            check_time = utc_now()
        elif isinstance(time, datetime):
            check_time = as_utc(time)
        else:
            try:
                check_time = parse_iso8601(time)
            except InvalidTimeFormat as e:
                return fail(e)
        check_time_str = format_iso8601(check_time)

        if self.expiration_time:
            expiration_time = parse_iso8601(self.expiration_time)
            if check_time >= expiration_time:
                return fail(
                    ExpiredMessage(
                        f"{check_time_str} < {self.expiration_time}",
                        f"{check_time_str} >= {self.expiration_time}",
                    )
                )

        if self.not_before:
            not_before = parse_iso8601(self.not_before)
            if check_time < not_before:
                return fail(
                    NotYetValidMessage(
                        f"{check_time_str} >= {self.not_before}",
                        f"{check_time_str} < {self.not_before}",
                    )
                )

        message = self.prepare_message()
        signature = params.get("signature")
        recovery = opts.get("recovery") or _default_recovery

        address = None
        if signature is None:
            logger.warning("No signature given for %s", self.address)
        else:
            try:
                address = recovery.recover(message, signature)
            except RecoveryError as e:
                logger.warning("No address recovered for %s: %s", self.address, e)

        if address == self.address:
            return VerifyResult(success=True, data=self)

        provider = opts.get("provider")
        if provider is not None and signature is not None:
            logger.debug("Falling back on EIP-1271 for %s", self.address)
            if check_contract_wallet_signature(
                address=self.address,
                message=message,
                signature=signature,
                w3=Web3(provider=provider),
            ):
                return VerifyResult(success=True, data=self)

        return fail(AddressMismatch(self.address, address))

    def validate_signature(
        self, signature: Signature, provider: Optional[HTTPProvider] = None
    ) -> "SiweMessage":
        """Verify the signature and return this message.

        Deprecated, use :meth:`verify` instead.
        """
        warnings.warn(
            "validate_signature() has been deprecated, please update your code to "
            "use verify(). validate_signature() may be removed in future versions.",
            DeprecationWarning,
            stacklevel=2,
        )
        opts: VerifyOpts = {"suppress_exceptions": False}
        if provider is not None:
            opts["provider"] = provider
        return self.verify({"signature": signature}, opts).data


class VerifyResult(BaseModel):
    """Outcome of `SiweMessage.verify`."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: SiweMessage
    error: Optional[SiweError] = None
