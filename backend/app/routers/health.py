from fastapi import APIRouter, Request

from app.config import settings

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict:
    source = getattr(request.app.state, "listing_source", None)
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "listing_source": source.source_name if source is not None else None,
    }
