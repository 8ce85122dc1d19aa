"""FastAPI application entry point for the OJTech resume API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ojtech_resume.api.routes import cvs, health, resumes

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create database tables before serving requests."""
    from ojtech_resume.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="OJTech Resume API",
    description="Generate, store and render student resumes as standalone HTML",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(cvs.router, prefix="/api")
app.include_router(resumes.router, prefix="/api")


def main() -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "ojtech_resume.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
