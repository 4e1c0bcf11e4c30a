import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from artmint.dependencies import get_chain_client
from artmint.models.nft import NFTMetadataOutput
from artmint.services.chain_client import ChainClientError, SolanaChainClient
from artmint.services.nft_service import NFTService

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_nft_service(chain_client: SolanaChainClient = Depends(get_chain_client)) -> NFTService:
    return NFTService(chain_client)


@router.get(
    "/{address}",
    response_model=NFTMetadataOutput,
    summary="Retrieve on-chain NFT metadata",
    response_description="The decoded metadata account of the NFT.",
)
async def get_nft_metadata(
    request: Request,
    address: str = Path(..., description="Base58 mint address of the NFT"),
    nft_service: NFTService = Depends(get_nft_service),
):
    """
    Fetches the Metaplex metadata account derived from the NFT mint address.

    64-bit integer fields are returned as decimal strings so they survive
    JSON decoding without loss of precision.
    """
    request.state.use_case = "nft_lookup"
    request.state.nft_address = address
    try:
        return await nft_service.get_nft_metadata(address)
    except HTTPException as e:
        raise e
    except Exception as e:
        if isinstance(e, ChainClientError):
            logger.error("Failed to fetch metadata for %s: %s", address, e)
        else:
            logger.exception("Unexpected error while fetching metadata for %s", address)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to fetch NFT metadata", "details": str(e)},
        )
