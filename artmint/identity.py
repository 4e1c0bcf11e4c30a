from dataclasses import dataclass

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from artmint.config import Settings


class IdentityConfigurationError(RuntimeError):
    """Raised when the service signing identity cannot be built from settings."""


@dataclass(frozen=True)
class ServiceIdentity:
    """
    The wallet that pays for, signs and is the verified creator of every mint.

    Built once at startup and shared read-only by all requests.
    """

    keypair: Keypair

    @property
    def public_key(self) -> Pubkey:
        return self.keypair.pubkey()

    def __repr__(self) -> str:
        return f"ServiceIdentity(public_key={self.public_key})"


def load_identity(settings: Settings) -> ServiceIdentity:
    secret = settings.SERVICE_SECRET_KEY.get_secret_value().strip()
    if not secret:
        raise IdentityConfigurationError("SERVICE_SECRET_KEY is not set.")
    try:
        raw = base58.b58decode(secret)
    except ValueError as e:
        raise IdentityConfigurationError(f"SERVICE_SECRET_KEY is not valid base58: {e}") from e
    if len(raw) != 64:
        raise IdentityConfigurationError(f"SERVICE_SECRET_KEY must decode to 64 bytes, got {len(raw)}.")
    try:
        keypair = Keypair.from_bytes(raw)
    except ValueError as e:
        raise IdentityConfigurationError(f"SERVICE_SECRET_KEY is not a valid keypair: {e}") from e
    return ServiceIdentity(keypair=keypair)
