from fastapi import APIRouter, Request

from artmint.config import settings

router = APIRouter()


@router.get("/health", summary="Health check endpoint", response_description="Application health status")
async def health_check():
    """
    Returns a simple success message if the application is running.
    Does not contact the Solana cluster.
    """
    return {"status": "ok", "message": "Application is running normally.", "environment": settings.ENVIRONMENT}


@router.get("/version", summary="Application version endpoint", response_description="Application name and version")
async def get_version(request: Request):
    """
    Returns the application name and version, and the address of the wallet
    that signs and is credited as creator of every mint.
    """
    identity = getattr(request.app.state, "identity", None)
    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "creator_address": str(identity.public_key) if identity else None,
    }
