from typing import Any, Dict

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class NFTMetadataOutput(BaseModel):
    """
    On-chain metadata of an NFT, as stored in its Metaplex metadata account.

    64-bit fields are rendered as decimal strings.
    """

    nft_address: str
    metadata: Dict[str, Any] = Field(description="Decoded metadata account fields.")

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
