from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import logging

from .api.recipes import router as recipes_router
from .api.websocket import router as ws_router
from .core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="voicechef", version="0.1.0", description="Hands-free guided cooking sessions")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers BEFORE static files mount
app.include_router(ws_router)
app.include_router(recipes_router)


@app.get("/api/health")
async def health_check():
    return {
        "status": "ok",
        "message": "voicechef API is running",
        "transcription_configured": settings.transcription_enabled,
    }


# Serve the web client if it has been built (this should be LAST)
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
