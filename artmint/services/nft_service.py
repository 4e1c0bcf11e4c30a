import logging

from fastapi import HTTPException, status

from artmint.models.nft import NFTMetadataOutput
from artmint.services.chain_client import SolanaChainClient
from artmint.utils.addresses import InvalidAddressError, parse_address
from artmint.utils.serialization import stringify_wide_integers

logger = logging.getLogger(__name__)


class NFTService:
    def __init__(self, chain_client: SolanaChainClient):
        self.chain_client = chain_client

    async def get_nft_metadata(self, address: str) -> NFTMetadataOutput:
        try:
            mint = parse_address(address)
        except InvalidAddressError as e:
            logger.warning("Rejected metadata lookup for %r: %s", address, e)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid NFT address")

        metadata = await self.chain_client.fetch_metadata(mint)
        if metadata is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"NFT metadata not found for {address}.")

        return NFTMetadataOutput(nft_address=str(mint), metadata=stringify_wide_integers(metadata))
