"""
Test Types Module

Tests for Address, TokenAmount, Signature and response decoding.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from onemoney_client.errors import DecodingError, EncodingError
from onemoney_client.types import (
    AccountBBNonce,
    AccountNonce,
    Address,
    AssociatedTokenAccount,
    FeeEstimate,
    LatestState,
    MintInfo,
    Signature,
    TokenAmount,
    Transaction,
    TransactionHash,
    TransactionReceipt,
    TransactionStatus,
    MAX_U256,
)

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
EIP55_VECTORS = [
    CHECKSUMMED,
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]


class TestAddress:
    """Address parsing and equality"""

    def test_equality_is_bytewise(self):
        lower = Address.from_hex(CHECKSUMMED.lower())
        upper = Address.from_hex("0x" + CHECKSUMMED[2:].upper())
        bare = Address.from_hex(CHECKSUMMED[2:])

        assert lower == upper == bare
        assert hash(lower) == hash(upper)
        assert len({lower, upper, bare}) == 1

    def test_str_is_checksummed(self):
        address = Address.from_hex(CHECKSUMMED.lower())
        assert str(address) == CHECKSUMMED
        assert address.hex() == CHECKSUMMED.lower()

    @pytest.mark.parametrize("text", EIP55_VECTORS)
    def test_eip55_vectors(self, text):
        assert str(Address.from_hex(text.lower())) == text
        assert Address.from_hex(text).checksum() == text

    def test_round_trip_over_sampled_bytes(self):
        from onemoney_client.infra.address import decode_address, encode_address

        for seed in range(32):
            raw = bytes((seed * 7 + i * 13) % 256 for i in range(20))
            address = Address(raw)
            assert decode_address(encode_address(address)) == address

    @pytest.mark.parametrize("text", [
        "0x1234",
        "0x" + "a" * 41,
        "0x" + "g" * 40,
        "0x" + "a" * 39 + " ",
        "0x" + "a" * 39 + "\n",
        " " + CHECKSUMMED,
        CHECKSUMMED + "\n",
        "\t" + CHECKSUMMED[2:],
        "",
    ])
    def test_rejects_bad_hex(self, text):
        with pytest.raises(EncodingError):
            Address.from_hex(text)

    def test_rejects_wrong_byte_length(self):
        with pytest.raises(EncodingError):
            Address(b"\x00" * 19)

    def test_is_valid_address_never_raises(self):
        from onemoney_client.infra.address import is_valid_address

        assert is_valid_address(CHECKSUMMED)
        assert not is_valid_address("0xnothex")
        assert not is_valid_address("0x12")

    def test_zero(self):
        assert Address.zero().value == bytes(20)


class TestTokenAmount:
    """TokenAmount never truncates"""

    def test_beyond_u64_preserved(self):
        big = 2 ** 64 * 1000 + 7
        amount = TokenAmount(big)
        assert int(amount) == big
        assert TokenAmount.parse(amount.to_wire()) == amount

    def test_max_u256(self):
        assert TokenAmount(MAX_U256).value == MAX_U256
        with pytest.raises(EncodingError):
            TokenAmount(MAX_U256 + 1)

    def test_negative_and_non_int_rejected(self):
        with pytest.raises(EncodingError):
            TokenAmount(-1)
        with pytest.raises(EncodingError):
            TokenAmount(1.5)
        with pytest.raises(EncodingError):
            TokenAmount(True)

    def test_parse_rejects_non_decimal(self):
        for text in ("0x10", "1e18", "-5", "1.0", ""):
            with pytest.raises(EncodingError):
                TokenAmount.parse(text)

    def test_from_units_18_decimals(self):
        amount = TokenAmount.from_units("1.5", 18)
        assert amount.value == 1_500_000_000_000_000_000
        assert amount.to_units(18) == Decimal("1.5")

    def test_from_units_large_amount_keeps_every_digit(self):
        amount = TokenAmount.from_units("123456789012345678901234567890.123456789012345678", 18)
        assert amount.value == 123456789012345678901234567890123456789012345678

    def test_from_units_rejects_excess_precision(self):
        with pytest.raises(EncodingError):
            TokenAmount.from_units("0.0000001", 6)

    def test_from_units_rejects_float(self):
        with pytest.raises(EncodingError):
            TokenAmount.from_units(0.1, 18)

    def test_arithmetic(self):
        assert TokenAmount(5) + TokenAmount(7) == TokenAmount(12)
        with pytest.raises(EncodingError):
            TokenAmount(5) - TokenAmount(7)
        assert TokenAmount(1) < TokenAmount(2)


class TestSignature:
    def test_to_dict_and_back(self):
        sig = Signature(r=0xABC, s=0xDEF, v=28)
        data = sig.to_dict()

        assert data == {"r": "0xabc", "s": "0xdef", "v": 28}
        assert Signature.from_dict(data) == sig

    def test_from_dict_accepts_decimal_strings(self):
        sig = Signature.from_dict({"r": "10", "s": 11, "v": "27"})
        assert (sig.r, sig.s, sig.v) == (10, 11, 27)

    def test_recovery_id(self):
        assert Signature(1, 1, 27).recovery_id == 0
        assert Signature(1, 1, 28).recovery_id == 1
        assert Signature(1, 1, 1).recovery_id == 1

    def test_to_bytes_is_65_bytes(self):
        raw = Signature(r=1, s=2, v=27).to_bytes()
        assert len(raw) == 65
        assert raw[31] == 1 and raw[63] == 2 and raw[64] == 27


class TestTransactionStatus:
    def test_terminal_states(self):
        assert not TransactionStatus.PENDING.is_terminal
        assert TransactionStatus.CONFIRMED.is_terminal
        assert TransactionStatus.FAILED.is_terminal


class TestResponseDecoding:
    """from_dict decoders raise DecodingError on bad shapes"""

    def test_account_nonce(self):
        assert AccountNonce.from_dict({"nonce": 42}).nonce == 42
        with pytest.raises(DecodingError):
            AccountNonce.from_dict({"nonce": "not-a-number"})
        with pytest.raises(DecodingError):
            AccountNonce.from_dict({})

    def test_transaction_hash_object_and_bare_string(self):
        tx_hash = "0x" + "AB" * 32

        assert TransactionHash.from_dict({"hash": tx_hash}).hash == tx_hash.lower()
        assert TransactionHash.from_dict(tx_hash).hash == tx_hash.lower()
        with pytest.raises(DecodingError):
            TransactionHash.from_dict("ab" * 32)
        with pytest.raises(DecodingError):
            TransactionHash.from_dict({"tx": tx_hash})
        with pytest.raises(DecodingError):
            TransactionHash.from_dict(["0x01"])

    def test_bbnonce(self):
        assert AccountBBNonce.from_dict({"bbnonce": 3}).bbnonce == 3

    def test_latest_state(self):
        state = LatestState.from_dict({"epoch": 10, "checkpoint": 200})
        assert (state.epoch, state.checkpoint) == (10, 200)

    def test_fee_estimate_decimal_string(self):
        fee = FeeEstimate.from_dict({"fee": "1000000000000000000000"})
        assert fee.fee.value == 10 ** 21

    def test_token_account(self):
        account = AssociatedTokenAccount.from_dict({
            "token_account_address": CHECKSUMMED,
            "balance": "99999999999999999999",
            "nonce": 1,
        })
        assert account.token_account_address == Address.from_hex(CHECKSUMMED)
        assert account.balance.value == 99999999999999999999

    def test_transaction_pending_and_included(self):
        base = {
            "hash": "0x" + "ab" * 32,
            "recent_epoch": 1,
            "recent_checkpoint": 2,
            "chain_id": 1212101,
            "from": CHECKSUMMED,
            "nonce": 0,
            "transaction_type": "Payment",
            "data": {"recipient": CHECKSUMMED, "value": "1", "token": CHECKSUMMED},
            "signature": {"r": "0x1", "s": "0x2", "v": 27},
        }
        pending = Transaction.from_dict(base)
        assert not pending.is_included
        assert pending.sender == Address.from_hex(CHECKSUMMED)

        included = Transaction.from_dict(dict(base, checkpoint_number=9, checkpoint_hash="0x" + "cd" * 32))
        assert included.is_included
        assert included.checkpoint_number == 9

    def test_transaction_missing_signature(self):
        with pytest.raises(DecodingError):
            Transaction.from_dict({"hash": "0x01", "chain_id": 1, "from": CHECKSUMMED, "nonce": 0})

    def test_receipt_status(self):
        receipt = TransactionReceipt.from_dict({
            "success": False,
            "transaction_hash": "0x" + "11" * 32,
            "fee_used": 21000,
            "from": CHECKSUMMED,
            "to": None,
            "checkpoint_number": 5,
        })
        assert receipt.status == TransactionStatus.FAILED
        assert receipt.recipient is None

    def test_receipt_rejects_non_bool_success(self):
        with pytest.raises(DecodingError):
            TransactionReceipt.from_dict({
                "success": "yes",
                "transaction_hash": "0x" + "11" * 32,
                "fee_used": 0,
                "from": CHECKSUMMED,
            })

    def test_mint_info_subset(self):
        info = MintInfo.from_dict({
            "symbol": "USD1",
            "master_authority": CHECKSUMMED,
            "master_mint_burn_authority": CHECKSUMMED,
            "mint_burn_authorities": [{"minter": CHECKSUMMED, "allowance": "100"}],
            "pause_authorities": [CHECKSUMMED],
            "list_authorities": [],
            "black_list": [],
            "white_list": [],
            "metadata_update_authorities": [],
            "supply": "1000000",
            "decimals": 6,
            "is_paused": False,
            "is_private": False,
            "meta": {"name": "One USD", "uri": "https://example.org", "additional_metadata": [
                {"key": "site", "value": "example"},
            ]},
        })
        assert info.symbol == "USD1"
        assert info.supply.value == 1_000_000
        assert info.meta.additional_metadata[0].key == "site"
        assert info.pause_authorities == [Address.from_hex(CHECKSUMMED)]
