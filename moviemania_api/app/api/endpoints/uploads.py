"""
Poster upload endpoint.

Accepts one multipart file in the ``poster`` field and answers in plain
text, ``success:<filename>``, which is what the admin panel parses.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import PlainTextResponse

from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.services.upload_service import UploadService


router = APIRouter()


@router.post("/upload-poster", response_class=PlainTextResponse)
async def upload_poster(
    poster: Optional[UploadFile] = File(None),
    current_admin: dict = Depends(get_current_admin),
) -> PlainTextResponse:
    if poster is None or not poster.filename:
        return PlainTextResponse("Error: No file uploaded.", status_code=status.HTTP_400_BAD_REQUEST)
    content = await poster.read()
    filename = UploadService.store_poster(poster.filename, content)
    return PlainTextResponse(f"success:{filename}")
