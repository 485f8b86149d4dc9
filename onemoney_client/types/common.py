"""
Common type definitions
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_utils import to_checksum_address

from ..errors import EncodingError


ADDRESS_LENGTH = 20
HEX_PREFIX = "0x"

MAX_U64 = 2 ** 64 - 1
MAX_U256 = 2 ** 256 - 1

_HEX_CHARS = re.compile(r"[0-9a-fA-F]*")
_DECIMAL_DIGITS = re.compile(r"[0-9]+")

# Enough significant digits for any U256 value at any realistic scale
_UNIT_PRECISION = 160


def _strip_hex_prefix(text: str) -> str:
    if text[:2] in ("0x", "0X"):
        return text[2:]
    return text


@dataclass(frozen=True)
class Address:
    """
    20-byte account or token address

    Equality and hashing compare the raw bytes, so two addresses written
    with different hex casing are the same address.

    Attributes:
        value: Raw 20 address bytes
    """
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise EncodingError.invalid("address", f"expected bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_LENGTH:
            raise EncodingError.invalid(
                "address", f"expected {ADDRESS_LENGTH} bytes, got {len(self.value)}"
            )
        if isinstance(self.value, bytearray):
            object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """
        Parse a hex address

        Accepts any casing, with or without the 0x prefix.

        Raises:
            EncodingError: Wrong length or non-hex characters
        """
        if not isinstance(text, str):
            raise EncodingError.invalid("address", f"expected str, got {type(text).__name__}")
        digits = _strip_hex_prefix(text)
        if len(digits) != ADDRESS_LENGTH * 2:
            raise EncodingError.invalid(
                "address", f"expected {ADDRESS_LENGTH * 2} hex characters, got {len(digits)}"
            )
        if not _HEX_CHARS.fullmatch(digits):
            raise EncodingError.invalid("address", f"non-hex characters in {text!r}")
        return cls(bytes.fromhex(digits))

    @classmethod
    def zero(cls) -> "Address":
        return cls(bytes(ADDRESS_LENGTH))

    def hex(self) -> str:
        """Lowercase 0x-prefixed form"""
        return HEX_PREFIX + self.value.hex()

    def checksum(self) -> str:
        """EIP-55 mixed-case form"""
        return to_checksum_address(self.hex())

    def __str__(self) -> str:
        return self.checksum()

    def __repr__(self) -> str:
        return f"Address({self.checksum()})"

    def __bytes__(self) -> bytes:
        return self.value


AddressLike = Union[Address, str, bytes]


def to_address(value: AddressLike, field_name: str = "address") -> Address:
    """Coerce an Address, hex string or raw bytes into an Address"""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.from_hex(value)
    if isinstance(value, (bytes, bytearray)):
        return Address(bytes(value))
    raise EncodingError.invalid(field_name, f"cannot convert {type(value).__name__} to address")


@dataclass(frozen=True, order=True)
class TokenAmount:
    """
    Token amount in smallest units

    Unbounded Python int checked against the 256-bit range the network uses.
    Conversions are explicit and never truncate: fractional unit amounts and
    out-of-range values raise instead of rounding.

    Attributes:
        value: Amount in smallest token units
    """
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise EncodingError.invalid("value", f"expected int, got {type(self.value).__name__}")
        if self.value < 0 or self.value > MAX_U256:
            raise EncodingError.out_of_range("value", self.value, 256)

    @classmethod
    def from_int(cls, value: int) -> "TokenAmount":
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> "TokenAmount":
        """Parse the decimal string form used on the wire"""
        if not isinstance(text, str) or not _DECIMAL_DIGITS.fullmatch(text.strip()):
            raise EncodingError.invalid("value", f"not a decimal integer string: {text!r}")
        return cls(int(text.strip()))

    @classmethod
    def from_units(cls, amount: Union[Decimal, int, str], decimals: int) -> "TokenAmount":
        """
        Convert a human amount (e.g. "1.5") into smallest units

        Args:
            amount: Amount in whole tokens
            decimals: Token decimal places

        Raises:
            EncodingError: Amount has more precision than the token supports
        """
        if isinstance(amount, float):
            raise EncodingError.invalid("value", "float amounts are not accepted, use Decimal or str")
        try:
            ui_amount = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except InvalidOperation as e:
            raise EncodingError.invalid("value", f"not a number: {amount!r}") from e
        if not ui_amount.is_finite():
            raise EncodingError.invalid("value", f"not a finite number: {amount!r}")
        with localcontext() as ctx:
            ctx.prec = _UNIT_PRECISION
            raw = ui_amount.scaleb(decimals)
            is_integral = raw == raw.to_integral_value()
        if not is_integral:
            raise EncodingError.invalid(
                "value", f"{amount} has more than {decimals} decimal places"
            )
        return cls(int(raw))

    def to_units(self, decimals: int) -> Decimal:
        """Amount in whole tokens"""
        with localcontext() as ctx:
            ctx.prec = _UNIT_PRECISION
            return Decimal(self.value).scaleb(-decimals)

    def to_wire(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __add__(self, other: "TokenAmount") -> "TokenAmount":
        if not isinstance(other, TokenAmount):
            return NotImplemented
        return TokenAmount(self.value + other.value)

    def __sub__(self, other: "TokenAmount") -> "TokenAmount":
        if not isinstance(other, TokenAmount):
            return NotImplemented
        return TokenAmount(self.value - other.value)


AmountLike = Union[TokenAmount, int, str]


def to_amount(value: AmountLike) -> TokenAmount:
    """Coerce an int or decimal string into a TokenAmount"""
    if isinstance(value, TokenAmount):
        return value
    if isinstance(value, str):
        return TokenAmount.parse(value)
    return TokenAmount(value)


def _parse_scalar(value: Union[int, str], name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"signature {name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text[:2] in ("0x", "0X"):
            return int(text[2:] or "0", 16)
        return int(text)
    raise ValueError(f"signature {name} must be int or str, got {type(value).__name__}")


@dataclass(frozen=True)
class Signature:
    """
    Recoverable secp256k1 signature

    Attributes:
        r: First 32-byte scalar
        s: Second 32-byte scalar
        v: Recovery indicator (recovery id + 27)
    """
    r: int
    s: int
    v: int

    @property
    def recovery_id(self) -> int:
        return self.v - 27 if self.v >= 27 else self.v

    def to_bytes(self) -> bytes:
        """65-byte r || s || v form"""
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def to_dict(self) -> dict:
        return {"r": hex(self.r), "s": hex(self.s), "v": self.v}

    @classmethod
    def from_dict(cls, data: dict) -> "Signature":
        """Accepts r/s as 0x-hex or decimal strings or ints"""
        return cls(
            r=_parse_scalar(data["r"], "r"),
            s=_parse_scalar(data["s"], "s"),
            v=_parse_scalar(data["v"], "v"),
        )

    def __repr__(self) -> str:
        return f"Signature(r={hex(self.r)}, s={hex(self.s)}, v={self.v})"
