import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
load_dotenv()

from loguru import logger
from contextlib import asynccontextmanager
from .config import load_settings
from .logging_config import logging_middleware, setup_logging
from .routers import interview
from .services import services

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    setup_logging(level=settings.log_level, log_dir=settings.log_dir)
    await services.init_services()
    yield
    await services.shutdown()

app = FastAPI(
    title="Mock Interview API",
    description="""
    Backend for the AI mock interviewer "Optimus".
    Keeps a short in-memory transcript per session, asks a Groq model for the
    next interviewer line and returns it with avatar expression, animation and
    simulated lip-sync cues.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(logging_middleware)

app.include_router(interview.router)

# System Endpoints

@app.get("/", tags=["System"], summary="Service Index")
async def root():
    return {
        "message": "Mock Interview API",
        "endpoints": {
            "/interview/chat": "One interviewer turn (POST)",
            "/interview/models": "Available Groq models",
            "/interview/reset": "Reset a session transcript (POST)",
            "/health": "Service health check",
        }
    }

@app.get("/health", tags=["System"], summary="Health Check")
async def health_check():
    """
    Report whether the interview services are up and Groq is configured.
    """
    settings = services.settings
    store = services.session_store
    return {
        "status": "online" if services.orchestrator else "starting",
        "groq_configured": bool(settings and settings.groq_api_key),
        "active_sessions": len(store) if store is not None else 0,
    }

if __name__ == "__main__":
    logger.info("Starting Mock Interview API with uvicorn")
    uvicorn.run("interview_app.main:app", host="0.0.0.0", port=8000, reload=True)
