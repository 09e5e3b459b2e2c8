"""
Bulk import of posts saved in a browser's local cache.
"""
from fastapi import APIRouter, Depends, Request

from ..config import get_settings
from ..dependencies import get_post_repository
from ..limiter import limiter
from ..logging_config import api_logger
from ..repositories import PostRepository
from ..responses import server_error
from ..schemas.posts import ImportRequest, ImportResponse

router = APIRouter(prefix="/api/import", tags=["import"])

settings = get_settings()


@router.post("", response_model=ImportResponse)
@limiter.limit(settings.write_rate_limit)
def import_posts(
    request: Request,
    payload: ImportRequest,
    repo: PostRepository = Depends(get_post_repository),
):
    """Append every supplied post as a new record. Existing posts are left untouched."""
    try:
        imported = repo.bulk_insert(payload.posts)
    except Exception as e:
        api_logger.error("Import error", error=e)
        server_error(str(e))

    api_logger.info("ADMIN: Posts imported", imported=imported)
    return ImportResponse(ok=True, imported=imported)
