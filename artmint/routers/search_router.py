import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from artmint.models.search import SearchInput, SearchOutput
from artmint.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_search_service() -> SearchService:
    return SearchService()


@router.post(
    "/search",
    response_model=SearchOutput,
    summary="Search existing works by tag",
    response_description="Catalog entries sharing at least one tag with the query.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SearchInput.model_json_schema(by_alias=True)}},
        }
    },
)
async def search_works(request: Request, search_service: SearchService = Depends(get_search_service)):
    """
    Returns every catalog work whose tags intersect `searchTags`, in catalog order.

    `searchInput` is echoed back in the response but does not filter results.
    The catalog is a fixed set of sample works.
    """
    request.state.use_case = "search"
    try:
        query = SearchInput.model_validate(await request.json())
        results = search_service.search(query.search_tags)
        return SearchOutput(query=query, results=results)
    except Exception as e:
        logger.error("Search failed: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Search failed.")
