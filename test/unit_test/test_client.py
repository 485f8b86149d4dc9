"""
Test OneMoneyClient

End-to-end module behavior against an in-memory transport: signing and
submission, status derivation, confirmation, token routing and queries.
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from onemoney_client import (
    Address,
    ApiError,
    Authority,
    AuthorityAction,
    ClientConfig,
    ConfirmationTimeoutError,
    EncodingError,
    OneMoneyClient,
    PauseAction,
    PaymentPayload,
    PollConfig,
    Signature,
    TokenAmount,
    TokenAuthorityPayload,
    TokenBurnAndBridgePayload,
    TokenPausePayload,
    TransactionStatus,
)
from onemoney_client.infra import HttpxTransport

# Test-only key - DO NOT use in production
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SENDER = Address.from_hex("0x2c7536E3605D9C16a7a3D7b1898e529396a65c23")
RECIPIENT = Address(b"\x22" * 20)
TOKEN = Address(b"\x11" * 20)
TX_HASH = "0x" + "ab" * 32
BASE = "http://127.0.0.1:18555/v1"


class FakeTransport:
    """Routes requests by URL path to queued responses"""

    def __init__(self, routes=None):
        self.routes = {path: list(responses) for path, responses in (routes or {}).items()}
        self.requests = []
        self.closed = False

    async def send(self, method, url, headers, body, timeout):
        self.requests.append((method, url, body))
        path = url[len(BASE):].split("?", 1)[0]
        status, payload = self.routes[path].pop(0)
        return status, json.dumps(payload).encode() if not isinstance(payload, bytes) else payload

    def bodies(self, path):
        return [json.loads(body) for method, url, body in self.requests if url.startswith(BASE + path)]


def _client(routes=None, **poll):
    transport = FakeTransport(routes)
    config = ClientConfig(
        network="local",
        base_url_override=None,
        timeout_seconds=5.0,
        poll=PollConfig(poll.get("max_attempts", 3), poll.get("interval_seconds", 0.0)),
    )
    return OneMoneyClient(config, transport=transport), transport


def _payment(nonce=0):
    return PaymentPayload(
        recent_epoch=10,
        recent_checkpoint=200,
        chain_id=1212101,
        nonce=nonce,
        recipient=RECIPIENT,
        value=TokenAmount(2 ** 70),
        token=TOKEN,
    )


def _tx(checkpoint_number=None):
    data = {
        "hash": TX_HASH,
        "chain_id": 1212101,
        "from": SENDER.checksum(),
        "nonce": 0,
        "recent_epoch": 10,
        "recent_checkpoint": 200,
        "signature": {"r": "0x1", "s": "0x2", "v": 27},
    }
    if checkpoint_number is not None:
        data["checkpoint_number"] = checkpoint_number
    return data


def _receipt(success=True):
    return {
        "success": success,
        "transaction_hash": TX_HASH,
        "fee_used": 1,
        "from": SENDER.checksum(),
        "to": RECIPIENT.checksum(),
        "checkpoint_number": 201,
    }


def test_factory_networks():
    assert OneMoneyClient.mainnet().chain_id == 21210
    assert OneMoneyClient.testnet().config.base_url == "https://api.testnet.1money.network"
    assert OneMoneyClient.local().config.network == "local"


def test_modules_are_cached():
    client, _ = _client()
    assert client.transactions is client.transactions
    assert client.tokens is client.tokens
    assert client.accounts is client.accounts
    assert client.states is client.states


@pytest.mark.asyncio
async def test_send_payment_posts_signed_flattened_body():
    client, transport = _client({"/transactions/payment": [(200, {"hash": TX_HASH.upper().replace("0X", "0x")})]})
    payload = _payment()

    result = await client.transactions.send_payment(payload, PRIVATE_KEY)

    assert result.hash == TX_HASH
    assert result.accepted_payload is payload

    body = transport.bodies("/transactions/payment")[0]
    assert body["recent_epoch"] == 10
    assert body["recipient"] == RECIPIENT.checksum()
    assert body["value"] == str(2 ** 70)
    assert set(body["signature"]) == {"r", "s", "v"}

    signature = Signature.from_dict(body["signature"])
    assert client.signer.recover_address_from_hash(payload.signature_hash(), signature) == SENDER


@pytest.mark.asyncio
async def test_submission_accepts_bare_hash_response():
    client, _ = _client({"/transactions/payment": [(200, TX_HASH)]})

    result = await client.transactions.send_payment(_payment(), PRIVATE_KEY)

    assert result.hash == TX_HASH


@pytest.mark.asyncio
async def test_send_payment_with_plain_inputs_sends_decimal_string():
    client, transport = _client({"/transactions/payment": [(200, {"hash": TX_HASH})]})
    payload = PaymentPayload(10, 200, 1212101, 0, RECIPIENT.hex(), 10 ** 18, TOKEN.hex())

    await client.transactions.send_payment(payload, PRIVATE_KEY)

    body = transport.bodies("/transactions/payment")[0]
    assert body["value"] == "1000000000000000000"
    assert body["recipient"] == RECIPIENT.checksum()
    assert body["token"] == TOKEN.checksum()


@pytest.mark.asyncio
async def test_submission_error_propagates():
    rejection = {"error_code": "business_nonce_mismatch", "message": "nonce too low"}
    client, _ = _client({"/transactions/payment": [(409, rejection)]})

    with pytest.raises(ApiError) as exc_info:
        await client.transactions.send_payment(_payment(), PRIVATE_KEY)

    assert exc_info.value.status_code == 409
    assert exc_info.value.error_code == "business_nonce_mismatch"


def test_invalid_key_fails_before_any_request():
    from onemoney_client import InvalidKeyError

    client, transport = _client()
    with pytest.raises(InvalidKeyError):
        client.transactions.send_payment(_payment(), "0x1234")
    assert transport.requests == []


@pytest.mark.asyncio
async def test_get_status_pending_when_not_included():
    client, transport = _client({"/transactions/by_hash": [(200, _tx())]})

    assert await client.transactions.get_status(TX_HASH) is TransactionStatus.PENDING
    assert len(transport.requests) == 1
    assert transport.requests[0][1] == f"{BASE}/transactions/by_hash?hash={TX_HASH}"


@pytest.mark.asyncio
async def test_get_status_uses_receipt_once_included():
    client, _ = _client({
        "/transactions/by_hash": [(200, _tx(201)), (200, _tx(201))],
        "/transactions/receipt/by_hash": [(200, _receipt(True)), (200, _receipt(False))],
    })

    assert await client.transactions.get_status(TX_HASH) is TransactionStatus.CONFIRMED
    assert await client.transactions.get_status(TX_HASH) is TransactionStatus.FAILED


@pytest.mark.asyncio
async def test_wait_for_confirmation():
    client, _ = _client({
        "/transactions/by_hash": [(200, _tx()), (200, _tx(201))],
        "/transactions/receipt/by_hash": [(200, _receipt(True))],
    })

    status = await client.transactions.wait_for_confirmation(TX_HASH)

    assert status is TransactionStatus.CONFIRMED


@pytest.mark.asyncio
async def test_wait_for_confirmation_times_out():
    client, transport = _client({"/transactions/by_hash": [(200, _tx())] * 2}, max_attempts=2)

    with pytest.raises(ConfirmationTimeoutError):
        await client.transactions.wait_for_confirmation(TX_HASH)

    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_estimate_fee_query():
    client, transport = _client({"/transactions/estimate_fee": [(200, {"fee": "21000"})]})

    fee = await client.transactions.estimate_fee(SENDER, TokenAmount(5), TOKEN)

    assert fee.fee == TokenAmount(21000)
    url = transport.requests[0][1]
    assert "from=" + SENDER.checksum() in url
    assert "value=5" in url


def _authority(action):
    return TokenAuthorityPayload(
        10, 200, 1212101, 1, action, Authority.MINT_BURN_TOKENS, RECIPIENT, TOKEN, TokenAmount(1000)
    )


@pytest.mark.asyncio
async def test_update_authority_routes_by_action():
    client, transport = _client({
        "/tokens/grant_authority": [(200, {"hash": TX_HASH})],
        "/tokens/revoke_authority": [(200, {"hash": TX_HASH})],
    })

    await client.tokens.update_authority(_authority(AuthorityAction.GRANT), PRIVATE_KEY)
    await client.tokens.update_authority(_authority(AuthorityAction.REVOKE), PRIVATE_KEY)

    paths = [url[len(BASE):] for method, url, body in transport.requests]
    assert paths == ["/tokens/grant_authority", "/tokens/revoke_authority"]
    assert transport.bodies("/tokens/grant_authority")[0]["authority_type"] == "MintBurnTokens"


def test_grant_with_revoke_action_is_rejected():
    client, transport = _client()
    with pytest.raises(EncodingError):
        client.tokens.grant_authority(_authority(AuthorityAction.REVOKE), PRIVATE_KEY)
    with pytest.raises(EncodingError):
        client.tokens.revoke_authority(_authority(AuthorityAction.GRANT), PRIVATE_KEY)
    assert transport.requests == []


@pytest.mark.asyncio
async def test_pause_and_burn_and_bridge_paths():
    client, transport = _client({
        "/tokens/pause": [(200, {"hash": TX_HASH})],
        "/tokens/burn_and_bridge": [(200, {"hash": TX_HASH})],
    })

    await client.tokens.pause(TokenPausePayload(10, 200, 1212101, 2, PauseAction.UNPAUSE, TOKEN), PRIVATE_KEY)
    await client.tokens.burn_and_bridge(
        TokenBurnAndBridgePayload(
            200, 1212101, 3, SENDER, TokenAmount(50), TOKEN, 1, "0x" + "44" * 20, TokenAmount(1), None, 7
        ),
        PRIVATE_KEY,
    )

    assert transport.bodies("/tokens/pause")[0]["action"] == "Unpause"
    bridge = transport.bodies("/tokens/burn_and_bridge")[0]
    assert bridge["bbnonce"] == 7
    assert bridge["bridge_metadata"] is None
    assert "recent_epoch" not in bridge


@pytest.mark.asyncio
async def test_account_and_state_queries():
    client, transport = _client({
        "/accounts/nonce": [(200, {"nonce": 5})],
        "/accounts/bbnonce": [(200, {"bbnonce": 2})],
        "/accounts/token_account": [(200, {
            "token_account_address": RECIPIENT.checksum(),
            "balance": str(10 ** 30),
            "nonce": 0,
        })],
        "/states/latest_epoch_checkpoint": [(200, {"epoch": 10, "checkpoint": 200})],
        "/chains/chain_id": [(200, {"chain_id": 1212101})],
        "/checkpoints/number": [(200, {"number": 201})],
    })

    assert (await client.accounts.get_nonce(SENDER)).nonce == 5
    assert (await client.accounts.get_bbnonce(SENDER)).bbnonce == 2
    account = await client.accounts.get_token_account(SENDER, TOKEN)
    assert account.balance == TokenAmount(10 ** 30)

    state = await client.states.get_latest_epoch_checkpoint()
    assert (state.epoch, state.checkpoint) == (10, 200)
    assert (await client.states.get_chain_id()).chain_id == client.chain_id
    assert (await client.states.get_checkpoint_number()).number == 201

    assert transport.requests[0][1] == f"{BASE}/accounts/nonce?address={SENDER.checksum()}"


def _checkpoint(transactions):
    return {
        "hash": "0x" + "90" * 32,
        "parent_hash": "0x" + "20" * 32,
        "state_root": "0x" + "18" * 32,
        "transactions_root": "0x" + "a1" * 32,
        "receipts_root": "0x" + "59" * 32,
        "number": 201,
        "timestamp": 1739760890,
        "extra_data": "",
        "transactions": transactions,
        "size": 1024,
    }


@pytest.mark.asyncio
async def test_checkpoint_queries():
    client, transport = _client({
        "/checkpoints/by_number": [(200, _checkpoint([TX_HASH]))],
        "/checkpoints/by_hash": [(200, _checkpoint([_tx(201)]))],
    })

    by_number = await client.states.get_checkpoint_by_number(201)
    by_hash = await client.states.get_checkpoint_by_hash("0x" + "90" * 32, full=True)

    assert by_number.number == 201
    assert by_number.transactions == [TX_HASH]
    assert by_hash.transactions[0].checkpoint_number == 201
    assert by_hash.transaction_hashes == [TX_HASH]
    assert by_hash.size == 1024

    urls = [url for method, url, body in transport.requests]
    assert urls[0] == f"{BASE}/checkpoints/by_number?number=201&full=false"
    assert urls[1] == f"{BASE}/checkpoints/by_hash?hash=0x{'90' * 32}&full=true"


@pytest.mark.asyncio
async def test_epoch_queries():
    client, transport = _client({
        "/governances/epoch": [(200, {
            "epoch_id": 42,
            "certificate_hash": "0x" + "aa" * 32,
            "certificate": {"type": "Epoch", "proposal": {"epoch": 42}},
        })],
        "/governances/epoch/by_id": [(200, {
            "epoch_id": 7,
            "certificate_hash": "0x" + "bb" * 32,
            "certificate": "0xdeadbeef",
        })],
    })

    current = await client.states.get_current_epoch()
    older = await client.states.get_epoch_by_id(7)

    assert current.epoch_id == 42
    assert current.certificate["proposal"]["epoch"] == 42
    assert current.certificate_bcs_hex is None
    assert older.certificate_bcs_hex == "0xdeadbeef"
    assert transport.requests[1][1] == f"{BASE}/governances/epoch/by_id?id=7"


def test_token_account_address_is_local():
    client, transport = _client()
    derived = client.accounts.token_account_address(SENDER, TOKEN)
    assert isinstance(derived, Address)
    assert transport.requests == []


@pytest.mark.asyncio
async def test_aclose_leaves_injected_transport_alone():
    client, transport = _client()
    async with client:
        pass
    assert transport.closed is False


@pytest.mark.asyncio
async def test_aclose_closes_owned_transport():
    client = OneMoneyClient.local()
    assert isinstance(client.dispatcher.transport, HttpxTransport)
    await client.aclose()
