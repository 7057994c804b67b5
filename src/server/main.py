"""FastAPI application for the usefulreadme preview server."""

from fastapi import FastAPI

from server.routers import render
from server.server_config import APP_DESCRIPTION, APP_TITLE

app = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION)
app.include_router(render.router)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}
