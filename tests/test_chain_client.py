from types import SimpleNamespace

import pytest
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from artmint.identity import ServiceIdentity
from artmint.services.chain_client import ChainClientError, NFTDefinition, SolanaChainClient
from artmint.utils.token_metadata import TOKEN_METADATA_PROGRAM_ID, MetadataAccount, find_metadata_pda


class StubRpc:
    """Answers the handful of AsyncClient calls SolanaChainClient makes."""

    def __init__(self, account=None, status_err=None, error=None):
        self.account = account
        self.status_err = status_err
        self.error = error
        self.sent = []

    def _maybe_fail(self):
        if self.error:
            raise self.error

    async def get_minimum_balance_for_rent_exemption(self, size):
        self._maybe_fail()
        return SimpleNamespace(value=1461600)

    async def get_latest_blockhash(self, commitment=None):
        self._maybe_fail()
        return SimpleNamespace(value=SimpleNamespace(blockhash=Hash.new_unique()))

    async def send_transaction(self, transaction, opts=None):
        self._maybe_fail()
        self.sent.append(transaction)
        return SimpleNamespace(value=transaction.signatures[0])

    async def confirm_transaction(self, signature, commitment=None):
        return SimpleNamespace(value=[SimpleNamespace(err=self.status_err)])

    async def get_account_info(self, address, commitment=None):
        self._maybe_fail()
        return SimpleNamespace(value=self.account)


@pytest.fixture
def identity():
    return ServiceIdentity(keypair=Keypair())


@pytest.fixture
def definition(identity):
    return NFTDefinition(
        owner=Keypair().pubkey(),
        name="The Grand Waterfall",
        symbol="ART",
        uri="https://ipfs.io/ipfs/QmWaterfall",
        seller_fee_basis_points=500,
        creators=[{"address": identity.public_key, "verified": True, "share": 100}],
    )


def test_build_create_nft_instructions(identity, definition):
    chain_client = SolanaChainClient(StubRpc(), identity, Confirmed)
    instructions = chain_client.build_create_nft_instructions(Keypair(), definition, 1461600)
    assert [ix.program_id for ix in instructions] == [
        SYSTEM_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        ASSOCIATED_TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        TOKEN_METADATA_PROGRAM_ID,
        TOKEN_METADATA_PROGRAM_ID,
    ]


@pytest.mark.asyncio
async def test_create_nft_signs_with_identity_and_mint(identity, definition):
    rpc = StubRpc()
    chain_client = SolanaChainClient(rpc, identity, Confirmed)
    mint = Keypair()

    confirmation = await chain_client.create_nft(mint, definition)

    assert confirmation.mint == mint.pubkey()
    assert isinstance(confirmation.signature, Signature)
    transaction = rpc.sent[0]
    assert transaction.message.account_keys[0] == identity.public_key
    assert mint.pubkey() in transaction.message.account_keys
    assert confirmation.signature == transaction.signatures[0]
    transaction.verify()


@pytest.mark.asyncio
async def test_create_nft_wraps_rpc_errors(identity, definition):
    chain_client = SolanaChainClient(StubRpc(error=RPCException("Blockhash not found")), identity, Confirmed)
    with pytest.raises(ChainClientError, match="Blockhash not found"):
        await chain_client.create_nft(Keypair(), definition)


@pytest.mark.asyncio
async def test_create_nft_reports_failed_transactions(identity, definition):
    chain_client = SolanaChainClient(StubRpc(status_err="InstructionError"), identity, Confirmed)
    with pytest.raises(ChainClientError, match="failed: InstructionError"):
        await chain_client.create_nft(Keypair(), definition)


@pytest.mark.asyncio
async def test_fetch_metadata_missing_account(identity):
    chain_client = SolanaChainClient(StubRpc(account=None), identity, Confirmed)
    assert await chain_client.fetch_metadata(Keypair().pubkey()) is None


@pytest.mark.asyncio
async def test_fetch_metadata_decodes_account(identity):
    mint = Keypair().pubkey()
    data = MetadataAccount.build({
        "key": 4,
        "update_authority": identity.public_key,
        "mint": mint,
        "data": {"name": "Art", "symbol": "ART", "uri": "ipfs://art", "seller_fee_basis_points": 500, "creators": None},
        "primary_sale_happened": False,
        "is_mutable": True,
        "edition_nonce": None,
        "token_standard": None,
        "collection": None,
        "uses": None,
        "collection_details": None,
        "_remaining": b"",
    })
    chain_client = SolanaChainClient(StubRpc(account=SimpleNamespace(data=data)), identity, Confirmed)

    record = await chain_client.fetch_metadata(mint)

    assert record["publicKey"] == str(find_metadata_pda(mint))
    assert record["mint"] == str(mint)
    assert record["name"] == "Art"
    assert record["creators"] is None


@pytest.mark.asyncio
async def test_fetch_metadata_wraps_errors(identity):
    chain_client = SolanaChainClient(StubRpc(error=RPCException("Node is unhealthy")), identity, Confirmed)
    with pytest.raises(ChainClientError, match="Node is unhealthy"):
        await chain_client.fetch_metadata(Keypair().pubkey())

    bad_account = SimpleNamespace(data=b"\x01" + bytes(10))
    chain_client = SolanaChainClient(StubRpc(account=bad_account), identity, Confirmed)
    with pytest.raises(ChainClientError, match="not a metadata account"):
        await chain_client.fetch_metadata(Keypair().pubkey())
