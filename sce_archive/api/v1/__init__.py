"""
API v1 routes.
"""

from fastapi import APIRouter

from sce_archive.api.v1 import accounts, admin, auth, posts, records
from sce_archive.schemas.common import ErrorResponse

# Every archive error is rendered with the same body shape
_error_responses = {
    code: {"model": ErrorResponse}
    for code in (400, 401, 403, 404, 409)
}

router = APIRouter(responses=_error_responses)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
router.include_router(records.router, prefix="/records", tags=["Records"])
router.include_router(posts.router, prefix="/posts", tags=["Posts"])
router.include_router(admin.router, prefix="/admin", tags=["Administration"])
