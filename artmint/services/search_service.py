from typing import Iterable, List

from artmint.models.search import CatalogEntry, CatalogMetadata

# Sample works bundled with the service. There is no backing index yet.
SAMPLE_CATALOG: List[CatalogEntry] = [
    CatalogEntry(
        nft_address="B9zYg...NFT_ADDRESS_1",
        metadata=CatalogMetadata(
            name="The Grand Waterfall",
            description="A stunning piece of a majestic waterfall.",
            tags=["waterfall", "scenery", "nature", "river"],
        ),
    ),
    CatalogEntry(
        nft_address="C8zYh...NFT_ADDRESS_2",
        metadata=CatalogMetadata(
            name="Sunset Over the City",
            description="A beautiful cityscape at sunset.",
            tags=["city", "sunset", "skyline", "buildings"],
        ),
    ),
]


class SearchService:
    def __init__(self, catalog: Iterable[CatalogEntry] = SAMPLE_CATALOG):
        self.catalog = list(catalog)

    def search(self, tags: Iterable[str]) -> List[CatalogEntry]:
        """Returns, in catalog order, every entry sharing at least one tag with ``tags``. Non-string tags are ignored."""
        wanted = {tag for tag in tags if isinstance(tag, str)}
        return [entry for entry in self.catalog if wanted.intersection(entry.metadata.tags)]
