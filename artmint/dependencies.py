from fastapi import Request

from artmint.identity import ServiceIdentity
from artmint.services.chain_client import SolanaChainClient


def get_identity(request: Request) -> ServiceIdentity:
    return request.app.state.identity


def get_chain_client(request: Request) -> SolanaChainClient:
    return request.app.state.chain_client
