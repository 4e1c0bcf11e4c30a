from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from faker import Faker
from httpx import ASGITransport, AsyncClient
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from artmint.dependencies import get_chain_client, get_identity
from artmint.identity import ServiceIdentity
from artmint.main import app
from artmint.services.chain_client import MintConfirmation, NFTDefinition


class FakeChainClient:
    """
    In-memory stand-in for SolanaChainClient.

    Records every call. Metadata is served from ``metadata`` keyed by mint
    address; ``mint_error`` / ``fetch_error`` are raised when set.
    """

    def __init__(self):
        self.minted: List[Tuple[Keypair, NFTDefinition]] = []
        self.lookups: List[Pubkey] = []
        self.metadata: Dict[str, Dict[str, Any]] = {}
        self.mint_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None
        self.confirmation: Optional[Any] = None

    async def create_nft(self, mint: Keypair, definition: NFTDefinition) -> Any:
        self.minted.append((mint, definition))
        if self.mint_error:
            raise self.mint_error
        if self.confirmation is not None:
            return self.confirmation
        return MintConfirmation(signature=Signature.new_unique(), mint=mint.pubkey())

    async def fetch_metadata(self, mint: Pubkey) -> Optional[Dict[str, Any]]:
        self.lookups.append(mint)
        if self.fetch_error:
            raise self.fetch_error
        return self.metadata.get(str(mint))


@pytest.fixture(scope="session")
def faker_instance():
    return Faker()


@pytest.fixture
def service_identity() -> ServiceIdentity:
    return ServiceIdentity(keypair=Keypair())


@pytest.fixture
def chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def wallet_address() -> str:
    return str(Keypair().pubkey())


@pytest_asyncio.fixture
async def client(chain_client: FakeChainClient, service_identity: ServiceIdentity):
    app.dependency_overrides[get_chain_client] = lambda: chain_client
    app.dependency_overrides[get_identity] = lambda: service_identity
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def mint_payload(faker_instance: Faker, wallet_address: str):
    def _mint_payload(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "userPublicKey": wallet_address,
            "title": faker_instance.sentence(nb_words=3).rstrip("."),
            "description": faker_instance.sentence(),
            "ipfsUri": f"https://ipfs.io/ipfs/Qm{faker_instance.sha1()}",
            "tags": faker_instance.words(nb=3),
        }
        payload.update(overrides)
        return payload
    return _mint_payload
