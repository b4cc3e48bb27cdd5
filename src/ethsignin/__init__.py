"""Library for EIP-4361 Sign-In with Ethereum."""

# flake8: noqa: F401
from .errors import (
    AddressMismatch,
    DomainMismatch,
    ExpiredMessage,
    InvalidAddress,
    InvalidDomain,
    InvalidMessage,
    InvalidMessageVersion,
    InvalidNonce,
    InvalidParams,
    InvalidSignature,
    InvalidStatement,
    InvalidTimeFormat,
    InvalidURI,
    MalformedSession,
    NonceMismatch,
    NotYetValidMessage,
    SiweError,
    SiweErrorType,
    UnableToParse,
    VerificationError,
)
from .recovery import EthAccountRecovery, RecoveryError, SignatureRecovery
from .siwe import SiweMessage, VerifyOpts, VerifyParams, VerifyResult
from .utils import generate_nonce, is_eip55_address, to_checksum_address
