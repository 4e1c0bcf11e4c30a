import pytest
from httpx import AsyncClient

from artmint.services.search_service import SAMPLE_CATALOG, SearchService


@pytest.mark.asyncio
async def test_search_by_single_tag(client: AsyncClient):
    response = await client.post("/api/search", json={"searchTags": ["waterfall"]})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Search successful!"
    assert body["query"] == {"searchInput": None, "searchTags": ["waterfall"]}
    assert [r["metadata"]["name"] for r in body["results"]] == ["The Grand Waterfall"]
    assert body["results"][0]["nftAddress"] == "B9zYg...NFT_ADDRESS_1"


@pytest.mark.asyncio
async def test_search_echoes_free_text_without_filtering(client: AsyncClient):
    response = await client.post("/api/search", json={"searchInput": "city lights", "searchTags": ["nature"]})
    assert response.status_code == 200
    body = response.json()
    assert body["query"]["searchInput"] == "city lights"
    assert [r["metadata"]["name"] for r in body["results"]] == ["The Grand Waterfall"]


@pytest.mark.asyncio
async def test_search_preserves_catalog_order(client: AsyncClient):
    response = await client.post("/api/search", json={"searchTags": ["sunset", "river"]})
    assert response.status_code == 200
    names = [r["metadata"]["name"] for r in response.json()["results"]]
    assert names == ["The Grand Waterfall", "Sunset Over the City"]


@pytest.mark.asyncio
async def test_search_without_matches(client: AsyncClient):
    response = await client.post("/api/search", json={"searchInput": "", "searchTags": ["desert"]})
    assert response.status_code == 200
    assert response.json()["results"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"searchInput": "waterfall"}, {"searchTags": "waterfall"}, ["waterfall"]])
async def test_search_malformed_body(client: AsyncClient, body):
    response = await client.post("/api/search", json=body)
    assert response.status_code == 500
    assert response.json()["detail"] == "Search failed."


@pytest.mark.asyncio
async def test_search_body_not_json(client: AsyncClient):
    response = await client.post("/api/search", content=b"searchTags=waterfall")
    assert response.status_code == 500
    assert response.json()["detail"] == "Search failed."


def test_search_service_is_pure_and_idempotent():
    service = SearchService()
    before = [entry.model_dump() for entry in service.catalog]
    first = service.search(["nature"])
    second = service.search(["nature"])
    assert first == second
    assert [entry.model_dump() for entry in service.catalog] == before
    assert [entry.metadata.name for entry in first] == ["The Grand Waterfall"]


def test_search_service_matches_exactly_entries_sharing_a_tag():
    service = SearchService()
    for entry in SAMPLE_CATALOG:
        for tag in entry.metadata.tags:
            assert service.search([tag]) == [e for e in SAMPLE_CATALOG if tag in e.metadata.tags]
    assert service.search([]) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tags, expected",
    [([1, "waterfall"], ["The Grand Waterfall"]), ([1], []), ([["nature"], {"tag": "city"}], [])],
)
async def test_search_ignores_non_string_tags(client: AsyncClient, tags, expected):
    response = await client.post("/api/search", json={"searchTags": tags})
    assert response.status_code == 200
    assert [r["metadata"]["name"] for r in response.json()["results"]] == expected
    assert response.json()["query"]["searchTags"] == tags


def test_search_service_skips_unhashable_and_non_string_tags():
    service = SearchService()
    assert service.search([1, None, ["nature"]]) == []
    assert [entry.metadata.name for entry in service.search([None, "city"])] == ["Sunset Over the City"]
