import logging
from typing import Any, Mapping, Optional

import base58
from fastapi import HTTPException, status
from solders.keypair import Keypair
from solders.signature import Signature

from artmint.identity import ServiceIdentity
from artmint.models.mint import MintNFTInput, MintNFTOutput
from artmint.services.chain_client import ChainClientError, NFTDefinition, SolanaChainClient
from artmint.utils.addresses import InvalidAddressError, parse_address

logger = logging.getLogger(__name__)

NFT_SYMBOL = "ART"
SELLER_FEE_BASIS_POINTS = 500  # 5%

# Where a confirmation may carry its transaction signature, in priority order.
SIGNATURE_LOCATIONS = (
    ("signature",),
    ("response", "signature"),
    ("txId",),
    ("transaction",),
)


def _lookup(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def extract_transaction_signature(confirmation: Any) -> Optional[str]:
    """
    Finds the transaction signature in a mint confirmation and returns it as base58 text.

    Raw signature bytes are base58-encoded; ``Signature`` objects are rendered
    with ``str``. Returns None when no known location holds a usable value.
    """
    for path in SIGNATURE_LOCATIONS:
        value = confirmation
        for key in path:
            value = _lookup(value, key)
        if not value:
            continue
        if isinstance(value, (bytes, bytearray, memoryview)):
            return base58.b58encode(bytes(value)).decode("ascii")
        if isinstance(value, Signature):
            return str(value)
        if isinstance(value, str):
            return value
    return None


class MintService:
    def __init__(self, chain_client: SolanaChainClient, identity: ServiceIdentity):
        self.chain_client = chain_client
        self.identity = identity

    async def mint_nft(self, mint_input: MintNFTInput) -> MintNFTOutput:
        logger.info(
            "Mint request: user=%s title=%r uri=%s tags=%s",
            mint_input.user_public_key,
            mint_input.title,
            mint_input.ipfs_uri,
            mint_input.tags,
        )

        try:
            owner = parse_address(mint_input.user_public_key)
        except InvalidAddressError as e:
            logger.warning("Rejected mint request: %s", e)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid userPublicKey")

        mint = Keypair()
        definition = NFTDefinition(
            owner=owner,
            name=mint_input.title,
            symbol=NFT_SYMBOL,
            uri=mint_input.ipfs_uri,
            seller_fee_basis_points=SELLER_FEE_BASIS_POINTS,
            is_mutable=False,
            creators=[{"address": self.identity.public_key, "verified": True, "share": 100}],
        )

        try:
            confirmation = await self.chain_client.create_nft(mint, definition)
        except ChainClientError as e:
            logger.error("Minting error for mint %s: %s", mint.pubkey(), e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": "Minting failed", "details": str(e)},
            )

        signature = extract_transaction_signature(confirmation)
        if not signature:
            logger.error("No transaction signature found. Full mint result: %r", confirmation)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Minting failed. Please check the server logs for details.",
            )

        logger.info("Minted NFT %s for %s in transaction %s", mint.pubkey(), owner, signature)
        return MintNFTOutput(
            transaction_signature=signature,
            nft_address=str(mint.pubkey()),
            tags=mint_input.tags,
            metadata_uri=mint_input.ipfs_uri,
        )
