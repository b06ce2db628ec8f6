import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Response

from api.folders import router as folders_router
from api.playlists import router as playlists_router
from api.sections import router as sections_router
from api.songs import router as songs_router
from db import create_db_and_tables
from settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(_: FastAPI):
    create_db_and_tables()
    logger.info("Database tables ready")
    yield

app = FastAPI(lifespan=lifespan, title="Chord Charts API")
app.include_router(songs_router)
app.include_router(sections_router)
app.include_router(folders_router)
app.include_router(playlists_router)

@app.get("/", include_in_schema=False)
def root():
    """Health check"""
    return Response("Server is running.", status_code=200)

def run_server():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
