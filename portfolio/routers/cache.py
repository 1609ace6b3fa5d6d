from fastapi import APIRouter, HTTPException, Request

from portfolio.core.errors import UnknownSectionError

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("")
async def cache_stats(request: Request):
    return request.app.state.cache.stats()


@router.delete("")
async def clear_cache(request: Request):
    request.app.state.content.invalidate()
    return {"status": "ok"}


@router.delete("/{section}")
async def clear_section(section: str, request: Request):
    try:
        request.app.state.content.invalidate(section)
    except UnknownSectionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "ok", "section": section}
