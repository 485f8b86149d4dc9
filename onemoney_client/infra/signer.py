"""
secp256k1 signing, recovery and address derivation using eth-keys

Signatures are deterministic (RFC 6979) recoverable ECDSA over a 32-byte
keccak256 prehash. The signer keeps no key material: every call takes the
private key, uses it, and lets it go before returning.
"""

from __future__ import annotations

import logging
from typing import Union

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import keccak

from .address import public_key_to_address
from .encoder import signature_hash
from ..errors import CryptoError, InvalidKeyError, InvalidSignatureError
from ..types.common import Address, AddressLike, Signature, to_address
from ..types.payloads import Payload

logger = logging.getLogger(__name__)

# secp256k1 group order
SECP256K1_N = SECPK1_N

RECOVERY_OFFSET = 27
HASH_LENGTH = 32
PRIVATE_KEY_LENGTH = 32

PrivateKeyLike = Union[bytes, bytearray, str]


def _private_key_bytes(private_key: PrivateKeyLike) -> bytes:
    """Normalize hex or raw key input; never echo the key in errors"""
    if isinstance(private_key, str):
        text = private_key.strip()
        if text[:2] in ("0x", "0X"):
            text = text[2:]
        if len(text) != PRIVATE_KEY_LENGTH * 2:
            raise InvalidKeyError(
                f"Private key must be {PRIVATE_KEY_LENGTH * 2} hex characters, got {len(text)}"
            )
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidKeyError("Private key is not valid hex") from e
    elif isinstance(private_key, (bytes, bytearray)):
        raw = bytes(private_key)
        if len(raw) != PRIVATE_KEY_LENGTH:
            raise InvalidKeyError(f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}")
    else:
        raise InvalidKeyError(f"Private key must be bytes or hex str, got {type(private_key).__name__}")

    scalar = int.from_bytes(raw, "big")
    if not 0 < scalar < SECP256K1_N:
        raise InvalidKeyError("Private key is outside the secp256k1 scalar range")
    return raw


def _load_private_key(private_key: PrivateKeyLike) -> keys.PrivateKey:
    raw = _private_key_bytes(private_key)
    try:
        return keys.PrivateKey(raw)
    except ValidationError as e:
        raise InvalidKeyError("Private key rejected by secp256k1 backend") from e


def _check_hash(message_hash: bytes) -> bytes:
    if not isinstance(message_hash, (bytes, bytearray)) or len(message_hash) != HASH_LENGTH:
        raise CryptoError(f"Message hash must be {HASH_LENGTH} bytes")
    return bytes(message_hash)


def _recovery_signature(signature: Signature) -> keys.Signature:
    """Validate signature components and build the backend signature object"""
    if not isinstance(signature, Signature):
        raise InvalidSignatureError(f"Expected Signature, got {type(signature).__name__}")
    if signature.v not in (0, 1, RECOVERY_OFFSET, RECOVERY_OFFSET + 1):
        raise InvalidSignatureError(f"Invalid recovery indicator v={signature.v}")
    if not 0 < signature.r < SECP256K1_N:
        raise InvalidSignatureError("Signature r is outside the valid range")
    if not 0 < signature.s < SECP256K1_N:
        raise InvalidSignatureError("Signature s is outside the valid range")
    try:
        return keys.Signature(vrs=(signature.recovery_id, signature.r, signature.s))
    except (ValidationError, BadSignature) as e:
        raise InvalidSignatureError(f"Malformed signature: {e}", original_error=e) from e


class Signer:
    """
    Stateless recoverable-ECDSA signer

    Usage:
        signer = Signer()
        sig = signer.sign_payload(payload, private_key_hex)
        assert signer.verify_hash(payload.signature_hash(), sig, signer.derive_address(private_key_hex))
    """

    def sign_hash(self, message_hash: bytes, private_key: PrivateKeyLike) -> Signature:
        """Sign a 32-byte prehash"""
        digest = _check_hash(message_hash)
        key = _load_private_key(private_key)
        raw = key.sign_msg_hash(digest)
        return Signature(r=raw.r, s=raw.s, v=raw.v + RECOVERY_OFFSET)

    def sign(self, message: bytes, private_key: PrivateKeyLike) -> Signature:
        """Sign keccak256(message)"""
        return self.sign_hash(keccak(bytes(message)), private_key)

    def sign_payload(self, payload: Payload, private_key: PrivateKeyLike) -> Signature:
        """Sign the canonical signature hash of a payload"""
        return self.sign_hash(signature_hash(payload), private_key)

    def recover_address_from_hash(self, message_hash: bytes, signature: Signature) -> Address:
        """
        Recover the signer address from a prehash and signature

        Raises:
            InvalidSignatureError: Components are malformed
            CryptoError: Recovery failed for well-formed input
        """
        digest = _check_hash(message_hash)
        backend_signature = _recovery_signature(signature)
        try:
            public_key = backend_signature.recover_public_key_from_msg_hash(digest)
        except (BadSignature, ValidationError) as e:
            raise CryptoError.recovery_failed(e) from e
        return public_key_to_address(public_key.to_bytes())

    def recover_address(self, message: bytes, signature: Signature) -> Address:
        """Recover the signer address of keccak256(message)"""
        return self.recover_address_from_hash(keccak(bytes(message)), signature)

    def verify_hash(self, message_hash: bytes, signature: Signature, expected_address: AddressLike) -> bool:
        """True when the signature over the prehash recovers to expected_address"""
        expected = to_address(expected_address, "expected_address")
        try:
            recovered = self.recover_address_from_hash(message_hash, signature)
        except CryptoError as e:
            logger.debug(f"Signature verification failed: {e}")
            return False
        return recovered == expected

    def verify(self, message: bytes, signature: Signature, expected_address: AddressLike) -> bool:
        """
        Check a signature over keccak256(message)

        Never raises for a malformed signature; returns False instead.
        """
        return self.verify_hash(keccak(bytes(message)), signature, expected_address)

    def public_key(self, private_key: PrivateKeyLike) -> bytes:
        """65-byte uncompressed public key (0x04 || X || Y)"""
        key = _load_private_key(private_key)
        return b"\x04" + key.public_key.to_bytes()

    def derive_address(self, private_key: PrivateKeyLike) -> Address:
        """Address controlled by a private key"""
        return public_key_to_address(self.public_key(private_key))


_default_signer = Signer()


def sign_payload(payload: Payload, private_key: PrivateKeyLike) -> Signature:
    """Sign a payload with the shared signer"""
    return _default_signer.sign_payload(payload, private_key)


def derive_address(private_key: PrivateKeyLike) -> Address:
    """Derive an address with the shared signer"""
    return _default_signer.derive_address(private_key)
