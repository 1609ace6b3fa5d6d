import logging

from fastapi import APIRouter, HTTPException, Request

from portfolio.core.errors import FetchError, UnknownCategoryError, UnknownSectionError
from portfolio.services.content_service import ALL_SKILLS, ContentService

router = APIRouter(prefix="/content", tags=["content"])
logger = logging.getLogger(__name__)


def _service(request: Request) -> ContentService:
    return request.app.state.content


@router.get("/skills/filter")
async def filtered_skills(request: Request, category: str = ALL_SKILLS):
    try:
        return await _service(request).get_filtered_skills(category)
    except UnknownCategoryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FetchError as e:
        logger.error(f"Skills fetch failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/{section}")
async def get_section(section: str, request: Request):
    try:
        return await _service(request).get_section(section)
    except UnknownSectionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FetchError as e:
        logger.error(f"Section {section} fetch failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/{section}/refresh")
async def refresh_section(section: str, request: Request):
    try:
        return await _service(request).refresh_section(section)
    except UnknownSectionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FetchError as e:
        logger.error(f"Section {section} refresh failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)
