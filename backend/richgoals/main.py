from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import close_db_pool, init_db_pool
from .goals import router as goals_router
from .logger import setup_logger
from .moderation import router as moderation_router
from .profiles import router as profiles_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logger(level=settings.log_level, log_file=settings.log_file, json_logs=settings.log_json)
    await init_db_pool()
    yield
    await close_db_pool()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(moderation_router)
app.include_router(profiles_router)
app.include_router(goals_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
