import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment

from artmint.common.health import router as health_router
from artmint.config import settings
from artmint.identity import load_identity
from artmint.logging_config import configure_logging
from artmint.middleware.request_context_middleware import RequestContextMiddleware
from artmint.routers import mint_router, nft_router, search_router
from artmint.services.chain_client import SolanaChainClient

logger = logging.getLogger(__name__)


# Identity and RPC connection live for the whole process
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    identity = load_identity(settings)
    commitment = Commitment(settings.SOLANA_COMMITMENT)
    rpc = AsyncClient(settings.SOLANA_RPC_URL, commitment=commitment)

    app.state.identity = identity
    app.state.chain_client = SolanaChainClient(rpc, identity, commitment)
    logger.info("Service wallet %s ready, RPC endpoint configured", identity.public_key)
    try:
        yield
    finally:
        await rpc.close()
        logger.info("Solana RPC connection closed.")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Mint artwork NFTs on Solana and look up their metadata",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

app.include_router(health_router, prefix="", tags=["Monitoring"])
app.include_router(mint_router.router, prefix="/api", tags=["Mint"])
app.include_router(search_router.router, prefix="/api", tags=["Search"])
app.include_router(nft_router.router, prefix="/api/nft", tags=["NFT"])
