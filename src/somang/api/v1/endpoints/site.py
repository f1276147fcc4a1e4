# src/somang/api/v1/endpoints/site.py
"""Static site content endpoints."""

from typing import Any

from fastapi import APIRouter

from somang.content.site import home_page, navigation

router = APIRouter(prefix="/site", tags=["site"])


@router.get("/home")
async def get_home() -> dict[str, Any]:
    """Return the bilingual home page copy."""
    return home_page()


@router.get("/categories")
async def list_categories() -> list[dict[str, Any]]:
    """Return the boards in navigation order."""
    return navigation()
