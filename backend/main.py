from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from infra.database.connection import init_db, close_db
from api.routers import songs
from utils.external_metadata import SongInfoClient
from utils.logger import get_logger

from config import settings

logger = get_logger(__name__)

# Lifespan event to handle startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.song_info_client = SongInfoClient(settings.API_BASE_URL, timeout=settings.API_TIMEOUT)
    logger.info(f"Song service started (lookup API: {settings.API_BASE_URL})")
    yield
    app.state.song_info_client.close()
    close_db()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Song library with lyrics pagination and external metadata enrichment.",
    lifespan=lifespan
)

# 入力検証エラーは 422 ではなく 400 で返す
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

# Root endpoint for health check
@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} API is running"}

# Include Routers
app.include_router(songs.router)
