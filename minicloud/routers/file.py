from fastapi import APIRouter, Depends, File, Form, UploadFile

from minicloud.dependencies import get_current_user, get_file_service
from minicloud.models.user_model import User
from minicloud.schemas.file_schema import ReturnFile
from minicloud.schemas.user_schema import ErrorResponse, MessageResponse
from minicloud.services.file_service import FileService

router = APIRouter()

OWNER_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid token format"},
    401: {"model": ErrorResponse, "description": "Invalid token"},
    403: {"model": ErrorResponse, "description": "Access denied"},
    404: {"model": ErrorResponse, "description": "File not found"},
}


@router.post("/upload", response_model=ReturnFile,
             summary="Upload a file",
             description="""
                Stores the file under the logged-in user's account. The content type is detected
                from the file content, the type declared by the client is ignored.
             """,
             responses={
                 400: {"model": ErrorResponse, "description": "Missing title or bad token format"},
                 401: {"model": ErrorResponse, "description": "Invalid token"},
                 500: {"model": ErrorResponse, "description": "Storage failure"},
             })
async def upload_file(file: UploadFile = File(...),
                      title: str = Form(...),
                      desc: str | None = Form(None),
                      user: User = Depends(get_current_user),
                      files: FileService = Depends(get_file_service)):
    data = await file.read()
    return files.upload(data, title, desc, user)


@router.get("/my-files", response_model=list[ReturnFile],
            summary="Displays the user's files",
            responses={401: {"model": ErrorResponse, "description": "Invalid token"}})
def list_my_files(user: User = Depends(get_current_user), files: FileService = Depends(get_file_service)):
    return files.list_owned(user)


@router.delete("/{file_id}", response_model=MessageResponse,
               summary="Deletes a file and its content", responses=OWNER_ERRORS)
def delete_file(file_id: int, user: User = Depends(get_current_user),
                files: FileService = Depends(get_file_service)):
    files.delete(file_id, user)
    return {"message": "File deleted successfully"}


@router.post("/{file_id}/share", response_model=ReturnFile,
             summary="Creates a public short link for a file", responses=OWNER_ERRORS)
def share_file(file_id: int, user: User = Depends(get_current_user),
               files: FileService = Depends(get_file_service)):
    return files.share(file_id, user)


@router.get("/{file_id}/public-url", response_model=ReturnFile | MessageResponse,
            summary="Shows the public short link of a file", responses=OWNER_ERRORS)
def get_public_url(file_id: int, user: User = Depends(get_current_user),
                   files: FileService = Depends(get_file_service)):
    record = files.get_owned(file_id, user)
    if record.short_code is None:
        return MessageResponse(message="File not shared yet")
    return ReturnFile.model_validate(record)


@router.delete("/{file_id}/share", response_model=MessageResponse,
               summary="Revokes the public short link of a file", responses=OWNER_ERRORS)
def revoke_share(file_id: int, user: User = Depends(get_current_user),
                 files: FileService = Depends(get_file_service)):
    files.revoke_share(file_id, user)
    return {"message": "File sharing revoked successfully"}
