from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class MintNFTInput(BaseModel):
    """
    Input model for minting an artwork NFT to a user's wallet.
    """

    user_public_key: Optional[Any] = Field(
        None, description="Base58 Solana address of the wallet that will own the new NFT."
    )
    title: str = Field("", description="Name of the artwork. Stored on-chain as the NFT name.")
    description: str = Field("", description="Description of the artwork.")
    ipfs_uri: str = Field("", description="URI of the off-chain JSON metadata, usually on IPFS.")
    tags: List[str] = Field(default_factory=list, description="Free-form tags describing the artwork.")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "userPublicKey": "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                    "title": "The Grand Waterfall",
                    "description": "A stunning piece of a majestic waterfall.",
                    "ipfsUri": "https://ipfs.io/ipfs/QmVGtJ8w1kmTjzBFZWzUVZ8kbsKh4Jx7cQmbuZ9HBwJbYw",
                    "tags": ["waterfall", "nature"],
                }
            ]
        },
    }


class MintNFTOutput(BaseModel):
    """
    Output model for a submitted and confirmed mint transaction.
    """

    message: str = "NFT mint transaction submitted!"
    transaction_signature: str
    nft_address: str
    tags: List[str]
    metadata_uri: str

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
