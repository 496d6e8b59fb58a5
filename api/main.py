from contextlib import asynccontextmanager

from fastapi import FastAPI

from contributors import router as contributors_router
from core import settings


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings.configure_logging()
    yield


app = FastAPI(lifespan=lifespan)

app.include_router(contributors_router.router, tags=["contributors"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "github contributors feed api"}
