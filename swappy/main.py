"""FastAPI application - serves the analysis API."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swappy.api.upload import router as upload_router
from swappy.api.websocket import router as ws_router

app = FastAPI(title="Swappy", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_router, prefix="/api")
app.include_router(ws_router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok"}


def configure_logging(level: str | None = None) -> None:
    from swappy.config import settings
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(name)s %(levelname)s: %(message)s",
    )


def run(reload: bool = False):
    import uvicorn
    from swappy.config import settings
    configure_logging()
    uvicorn.run(
        "swappy.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
    )
