import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clients import router as clients_router
from core import config, db
from core.errors import EmptyRecord, NotFound, StorageOperationFailure
from faqs import router as faqs_router
from files import router as files_router
from projects import router as projects_router
from tasks import router as tasks_router
from users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # One storage client per process; connections are opened per query.
    db.init_database(config.get_settings())
    try:
        yield
    finally:
        db.close_database()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFound)
async def not_found_handler(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(EmptyRecord)
async def empty_record_handler(_: Request, exc: EmptyRecord) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(StorageOperationFailure)
async def storage_failure_handler(request: Request, exc: StorageOperationFailure) -> JSONResponse:
    logger.error("storage_failure method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage operation failed."},
    )


app.include_router(users_router.router, tags=["users"])
app.include_router(clients_router.router, tags=["clients"])
app.include_router(projects_router.router, tags=["projects"])
app.include_router(tasks_router.router, tags=["tasks"])
app.include_router(faqs_router.router, tags=["faqs"])
app.include_router(files_router.router, tags=["files"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "project-management api"}
