from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from resume_builder.utils.timestamps import utc_now_iso

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "timestamp": utc_now_iso()}


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "Resume Builder Server API is running"
