from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CatalogMetadata(BaseModel):
    name: str
    description: str
    tags: List[str]


class CatalogEntry(BaseModel):
    nft_address: str
    metadata: CatalogMetadata

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class SearchInput(BaseModel):
    """
    Input model for searching existing works.

    Only `searchTags` filters results; `searchInput` is echoed back unchanged.
    """

    search_input: Optional[str] = Field(None, description="Free text entered by the user.")
    search_tags: List[Any] = Field(description="Tags to match against the catalog. Non-string tags never match.")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"searchInput": "falls", "searchTags": ["waterfall"]}]},
    }


class SearchOutput(BaseModel):
    message: str = "Search successful!"
    query: SearchInput
    results: List[CatalogEntry]
