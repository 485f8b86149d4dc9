"""
Address codec and derivation rules

An address is the last 20 bytes of keccak256 over the 64-byte uncompressed
public key (without the 0x04 prefix). Token accounts are derived from the
owner wallet and the token mint.
"""

from typing import Union

from eth_utils import keccak

from ..errors import CryptoError, EncodingError
from ..types.common import Address, AddressLike, to_address

TOKEN_ACCOUNT_SEED = b"token_account"

_UNCOMPRESSED_PREFIX = 0x04


def encode_address(address: Address) -> str:
    """Human-readable checksummed hex"""
    if not isinstance(address, Address):
        raise EncodingError.invalid("address", f"expected Address, got {type(address).__name__}")
    return address.checksum()


def decode_address(text: str) -> Address:
    """
    Parse hex text into an Address

    Raises:
        EncodingError: Wrong length or invalid characters
    """
    return Address.from_hex(text)


def is_valid_address(text: str) -> bool:
    try:
        Address.from_hex(text)
    except EncodingError:
        return False
    return True


def public_key_to_address(public_key: Union[bytes, bytearray]) -> Address:
    """
    Derive an address from a public key

    Args:
        public_key: 65-byte uncompressed key (0x04 || X || Y) or the bare 64-byte X || Y

    Raises:
        CryptoError: Key has the wrong length or prefix
    """
    key = bytes(public_key)
    if len(key) == 65:
        if key[0] != _UNCOMPRESSED_PREFIX:
            raise CryptoError(f"Uncompressed public key must start with 0x04, got 0x{key[0]:02x}")
        key = key[1:]
    elif len(key) != 64:
        raise CryptoError(f"Public key must be 64 or 65 bytes, got {len(key)}")
    return Address(keccak(key)[-20:])


def derive_token_account_address(wallet: AddressLike, mint: AddressLike) -> Address:
    """Associated token account of `wallet` for token `mint`"""
    wallet_address = to_address(wallet, "wallet")
    mint_address = to_address(mint, "mint")
    digest = keccak(wallet_address.value + mint_address.value + TOKEN_ACCOUNT_SEED)
    return Address(digest[-20:])
