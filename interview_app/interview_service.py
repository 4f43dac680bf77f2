from typing import Optional
import httpx
from loguru import logger
from .config import MODEL_CATALOG, MODEL_USAGE, Settings, resolve_model
from .groq_client import GroqClient
from .lipsync import generate_lipsync
from .models import (
    Animation, ChatRequest, ChatResponse, FacialExpression, ModelCatalogResponse,
    ModelInfo, ReplyMessage, ResetResponse, Role,
)
from .prompts import (
    CONNECTION_TROUBLE_LIPSYNC_TEXT, CONNECTION_TROUBLE_TEXT, GREETING_MESSAGE,
    NOT_CONFIGURED_LIPSYNC_TEXT, NOT_CONFIGURED_TEXT,
)
from .response_parser import parse_structured_reply
from .session_store import DEFAULT_SESSION_ID, SessionStore


def _sad_reply(text: str, lipsync_text: str) -> ReplyMessage:
    return ReplyMessage(
        text=text,
        lipsync=generate_lipsync(lipsync_text),
        facialExpression=FacialExpression.SAD,
        animation=Animation.IDLE,
    )


class InterviewOrchestrator:
    def __init__(
        self,
        session_store: SessionStore,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_store = session_store
        self.settings = settings
        self.client: Optional[GroqClient] = None
        if settings.groq_api_key:
            self.client = GroqClient(
                settings.groq_api_key,
                api_url=settings.groq_api_url,
                timeout=settings.request_timeout,
                transport=transport,
            )
        else:
            logger.warning("GROQ_API_KEY not set. Interview chat will return a not-configured reply.")

    async def chat(self, request: ChatRequest, query_model: Optional[str] = None) -> ChatResponse:
        """
        Runs one interview turn:
        1. Session: get or create the transcript and append the user turn.
        2. Completion: send the whole transcript to Groq.
        3. Reply: parse the JSON answer, fabricate lip-sync.
        4. History: append the raw answer and truncate.
        A response carrying `error` is meant to be served as HTTP 500.
        """
        if self.client is None:
            return ChatResponse(messages=[_sad_reply(NOT_CONFIGURED_TEXT, NOT_CONFIGURED_LIPSYNC_TEXT)])

        session_id = request.sessionId or DEFAULT_SESSION_ID
        model = resolve_model(query_model or request.model, self.settings)
        store = self.session_store

        async with store.locked(session_id):
            store.get_or_create(session_id)
            if request.message and request.message.strip():
                store.append(session_id, Role.USER, request.message)
            else:
                store.append(session_id, Role.USER, GREETING_MESSAGE)

            try:
                completion = await self.client.chat_completion(
                    model=model,
                    messages=store.as_payload(session_id),
                    temperature=self.settings.temperature,
                    max_tokens=self.settings.max_tokens,
                )
            except Exception as e:
                logger.error(f"Interview chat error for session {session_id}: {e}")
                store.truncate_if_needed(session_id)
                return ChatResponse(
                    messages=[_sad_reply(CONNECTION_TROUBLE_TEXT, CONNECTION_TROUBLE_LIPSYNC_TEXT)],
                    error=str(e),
                )

            reply = parse_structured_reply(completion.content)
            # History keeps what the model actually said, not the re-wrapped reply
            store.append(session_id, Role.ASSISTANT, completion.content)
            store.truncate_if_needed(session_id)

        logger.info(f"Interview turn complete: session={session_id} model={completion.model or model}")
        return ChatResponse(
            messages=[ReplyMessage(
                text=reply.text,
                lipsync=generate_lipsync(reply.text),
                facialExpression=reply.facialExpression,
                animation=reply.animation,
            )],
            model=completion.model or model,
        )

    def list_models(self) -> ModelCatalogResponse:
        return ModelCatalogResponse(
            current=self.settings.default_model,
            available=[ModelInfo(**entry) for entry in MODEL_CATALOG],
            usage=MODEL_USAGE,
        )

    async def reset_session(self, session_id: Optional[str] = None) -> ResetResponse:
        session_id = session_id or DEFAULT_SESSION_ID
        async with self.session_store.locked(session_id):
            self.session_store.reset(session_id)
        return ResetResponse()
