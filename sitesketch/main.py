"""
sitesketch - Main Application

Describe a website in plain language and watch the AI-generated code stream in.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path
import logging

from sitesketch.config import get_settings, configure_logging
from sitesketch.routes import router
from sitesketch.services.ai_service import get_ai_service

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Streams AI-generated HTML/CSS/JavaScript for a described website",
    version="0.1.0",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files before router
public_path = Path(settings.public_dir)
if public_path.exists():
    app.mount("/static", StaticFiles(directory=str(public_path)), name="static")

app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Log the provider setup on startup."""
    models = get_ai_service().available_models()
    logger.info("%s starting...", settings.app_name)
    for provider, names in models.items():
        configured = "configured" if settings.api_key_for(provider) else "no API key"
        logger.info("Provider %s (%s): %d model(s)", provider, configured, len(names))


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("%s shutting down...", settings.app_name)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sitesketch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
