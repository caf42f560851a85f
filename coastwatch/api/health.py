from fastapi import APIRouter

from coastwatch.core.errors import format_success

router = APIRouter(tags=["health"])

@router.get("/health")
async def health():
    return format_success(message="OK")
