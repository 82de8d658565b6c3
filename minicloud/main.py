import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
load_dotenv()

from minicloud.database import Base, db
from minicloud.errors import MiniCloudError
from minicloud.logging_config import setup_logging
from minicloud.models import file_model, user_model
from minicloud.routers import auth, file, public

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=db)

app = FastAPI(title="MiniCloud")

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(file.router, prefix="/files", tags=["Files"])
app.include_router(public.router, prefix="/public", tags=["Public"])


@app.exception_handler(MiniCloudError)
async def minicloud_error_handler(request: Request, exc: MiniCloudError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/")
def read_root():
    return "Server is running"
