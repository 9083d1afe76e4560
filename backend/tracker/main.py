import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .advice import router as advice_router
from .auth import router as auth_router
from .config import settings
from .database import close_storage, init_storage
from .expenses import router as expenses_router
from .goals import router as goals_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_storage()
    yield
    await close_storage()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.include_router(auth_router)
app.include_router(expenses_router)
app.include_router(goals_router)
app.include_router(advice_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
