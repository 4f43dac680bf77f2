from typing import Optional
import httpx
from fastapi import HTTPException
from loguru import logger
from .config import Settings, load_settings
from .interview_service import InterviewOrchestrator
from .session_store import SessionStore


class Services:
    def __init__(self):
        self.settings: Optional[Settings] = None
        self.session_store: Optional[SessionStore] = None
        self.orchestrator: Optional[InterviewOrchestrator] = None

    async def init_services(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize settings, the session registry and the interview orchestrator.
        """
        logger.info(f"Starting interview services... Instance ID: {id(self)}")
        self.settings = load_settings()
        self.session_store = SessionStore(history_turns=self.settings.max_history_turns)
        self.orchestrator = InterviewOrchestrator(self.session_store, self.settings, transport=transport)
        logger.info(
            f"Interview services ready. Default model: {self.settings.default_model}, "
            f"Groq configured: {bool(self.settings.groq_api_key)}"
        )

    async def shutdown(self):
        if self.session_store is not None:
            logger.info(f"Dropping {len(self.session_store)} in-memory interview session(s).")
        self.orchestrator = None
        self.session_store = None

services = Services()

def get_orchestrator() -> InterviewOrchestrator:
    if services.orchestrator is None:
        raise HTTPException(status_code=503, detail="Interview service not initialized")
    return services.orchestrator
