import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from activations import router as activations_router
from auth import router as auth_router
from core import config, db
from core.errors import APIError, StorageError
from core.logs import configure_logging
from performers import router as performers_router
from studios import router as studios_router

logger = logging.getLogger(__name__)


def cors_origins() -> list[str]:
    return config.env_list("CORS_ORIGINS", ["http://localhost:5173", "http://127.0.0.1:5173"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One pool per process, handed to requests through db.get_pool.
    app.state.db_pool = await db.create_pool()
    try:
        yield
    finally:
        await db.close_pool(app.state.db_pool)
        app.state.db_pool = None


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if isinstance(exc, StorageError):
        # Driver text stays in the server log.
        logger.error(
            "storage_error path=%s operation=%s entity=%s",
            request.url.path,
            exc.operation,
            exc.entity,
            exc_info=exc,
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal Server Error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(auth_router.router, tags=["auth"])
app.include_router(activations_router.router, tags=["activations"])
app.include_router(performers_router.router, tags=["performers"])
app.include_router(studios_router.router, tags=["studios"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "performer catalog api"}
