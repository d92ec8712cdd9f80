"""Search routes - aggregated book and video catalog search."""
from fastapi import APIRouter, Depends, Query

from catalog.aggregator import SearchAggregator
from catalog.models import AggregatedSearchResponse
from dependencies import get_search_aggregator

router = APIRouter(tags=["search"])


@router.get("/search", response_model=AggregatedSearchResponse)
async def search_item(
    term: str = Query("", description="Free-text search term; empty returns no results"),
    aggregator: SearchAggregator = Depends(get_search_aggregator),
):
    """Search both catalogs. A failing catalog yields an empty list plus an error status."""
    return await aggregator.search(term)
