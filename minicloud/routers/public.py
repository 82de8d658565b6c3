import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from minicloud.dependencies import get_file_service
from minicloud.schemas.user_schema import ErrorResponse
from minicloud.services.file_service import FileService

router = APIRouter()

UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f"\\]')


def content_disposition(disposition: str, filename: str) -> str:
    ascii_name = UNSAFE_FILENAME_CHARS.sub("", filename.encode("ascii", "ignore").decode())
    value = f'{disposition}; filename="{ascii_name or "download"}"'
    if ascii_name != filename:
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


@router.get("/{short_code}",
            summary="Downloads a shared file without logging in",
            description="""
                Files with a renderable type (text, images, audio, video, PDF, JSON, XML, JavaScript)
                are served inline, everything else as an attachment.
            """,
            responses={
                200: {"content": {"application/octet-stream": {}}},
                404: {"model": ErrorResponse, "description": "Link not found or revoked"},
            })
def download_shared(short_code: str, files: FileService = Depends(get_file_service)):
    shared = files.resolve_public(short_code)
    return Response(
        content=shared.content,
        media_type=shared.content_type,
        headers={"Content-Disposition": content_disposition(shared.disposition, shared.filename)},
    )
