import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from artmint.dependencies import get_chain_client, get_identity
from artmint.identity import ServiceIdentity
from artmint.models.mint import MintNFTInput, MintNFTOutput
from artmint.services.chain_client import SolanaChainClient
from artmint.services.mint_service import MintService

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_mint_service(
    chain_client: SolanaChainClient = Depends(get_chain_client),
    identity: ServiceIdentity = Depends(get_identity),
) -> MintService:
    return MintService(chain_client, identity)


@router.post(
    "/mint",
    response_model=MintNFTOutput,
    status_code=status.HTTP_200_OK,
    summary="Mint a new artwork NFT",
    response_description="Signature of the confirmed mint transaction and the new NFT address.",
)
async def mint_nft(
    request: Request,
    mint_input: MintNFTInput = Body(...),
    mint_service: MintService = Depends(get_mint_service),
):
    """
    Mints a non-fungible token for an artwork and assigns it to `userPublicKey`.

    The service wallet pays for the transaction and is the single verified
    creator. Royalties are fixed at 5% and the metadata is immutable.
    """
    request.state.use_case = "mint"
    try:
        result = await mint_service.mint_nft(mint_input)
        request.state.nft_address = result.nft_address
        return result
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.exception("Unexpected error while minting")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Minting failed due to an unexpected error.", "details": str(e)},
        )
