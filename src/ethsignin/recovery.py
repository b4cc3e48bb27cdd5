"""Signature recovery collaborators.

The verifier only needs an object exposing
``recover(message, signature) -> address``. The default implementation
recovers EIP-191 ``personal_sign`` signatures with ``eth_account``; contract
wallets are supported through EIP-1271 when a web3 provider is supplied.
"""

import logging
from typing import Union

from eth_account import Account
from eth_account.messages import SignableMessage, _hash_eip191_message, encode_defunct
from eth_keys.exceptions import BadSignature
from eth_typing import ChecksumAddress
from eth_utils import to_bytes
from eth_utils.exceptions import ValidationError
from typing_extensions import Protocol
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

logger = logging.getLogger(__name__)

EIP1271_CONTRACT_ABI = [
    {
        "inputs": [
            {"internalType": "bytes32", "name": " _message", "type": "bytes32"},
            {"internalType": "bytes", "name": " _signature", "type": "bytes"},
        ],
        "name": "isValidSignature",
        "outputs": [{"internalType": "bytes4", "name": "", "type": "bytes4"}],
        "stateMutability": "view",
        "type": "function",
    }
]
EIP1271_MAGICVALUE = "1626ba7e"

Signature = Union[str, bytes]


class RecoveryError(Exception):
    """No address could be recovered from the signature."""

    pass


class SignatureRecovery(Protocol):
    """Anything able to recover the signer of a text message."""

    def recover(self, message: str, signature: Signature) -> str:
        ...


class EthAccountRecovery:
    """Recover EIP-191 signers with ``eth_account``."""

    def recover(self, message: str, signature: Signature) -> ChecksumAddress:
        """Recover the checksummed address that signed ``message``.

        :raises RecoveryError: when the signature is malformed.
        """
        try:
            return Account.recover_message(
                encode_defunct(text=message), signature=signature
            )
        except (ValueError, ValidationError, BadSignature) as e:
            raise RecoveryError(f"Unable to recover signer: {e}") from e


def check_contract_wallet_signature(
    address: ChecksumAddress, message: str, signature: Signature, w3: Web3
) -> bool:
    """Call the EIP-1271 method for a Smart Contract wallet.

    :param address: The address of the contract
    :param message: The EIP-4361 formatted message
    :param signature: The EIP-1271 signature
    :param w3: A Web3 provider able to perform a contract check.
    :return: True if the signature is valid per EIP-1271.
    """
    signable: SignableMessage = encode_defunct(text=message)
    contract = w3.eth.contract(address=address, abi=EIP1271_CONTRACT_ABI)
    hash_ = _hash_eip191_message(signable)
    if isinstance(signature, str):
        try:
            signature = to_bytes(hexstr=signature)
        except ValueError as e:
            logger.debug("EIP-1271 signature for %s is not hex: %s", address, e)
            return False
    try:
        response = contract.caller.isValidSignature(hash_, signature)
    except (BadFunctionCallOutput, ContractLogicError) as e:
        logger.debug("EIP-1271 check failed for %s: %s", address, e)
        return False
    return bytes(response).hex() == EIP1271_MAGICVALUE
