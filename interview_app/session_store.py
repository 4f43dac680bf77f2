import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List, Optional
from loguru import logger
from .models import Message, Role
from .prompts import get_interviewer_system_prompt

DEFAULT_SESSION_ID = "default"


class SessionStore:
    """In-memory registry of interview transcripts keyed by session id.

    Every transcript starts with the interviewer system prompt. Nothing is
    persisted: transcripts disappear on reset or process restart.

    Attributes:
        history_turns: Number of turns kept after the system prompt once a
            transcript grows past its ceiling.
    """

    def __init__(self, history_turns: int = 20):
        self.history_turns = history_turns
        self._sessions: Dict[str, List[Message]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @asynccontextmanager
    async def locked(self, session_id: str):
        """Per-session lock so turns on the same session never interleave.

        The lock is dropped once nobody holds or waits for it and the
        session has been reset.
        """
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[session_id] -= 1
            if not self._lock_users[session_id]:
                del self._lock_users[session_id]
                if session_id not in self._sessions:
                    self._locks.pop(session_id, None)

    def has_lock(self, session_id: str) -> bool:
        return session_id in self._locks

    def get_or_create(self, session_id: str) -> List[Message]:
        """Retrieve the transcript for a session or create one seeded with the system prompt."""
        transcript = self._sessions.get(session_id)
        if transcript is None:
            transcript = [Message(role=Role.SYSTEM, content=get_interviewer_system_prompt())]
            self._sessions[session_id] = transcript
            logger.info(f"Created interview session {session_id}")
        return list(transcript)

    def get(self, session_id: str) -> Optional[List[Message]]:
        transcript = self._sessions.get(session_id)
        return list(transcript) if transcript is not None else None

    def append(self, session_id: str, role: Role, content: str) -> None:
        # Unknown sessions are ignored; callers get_or_create first
        transcript = self._sessions.get(session_id)
        if transcript is None:
            logger.debug(f"Ignoring {role.value} turn for unknown session {session_id}")
            return
        transcript.append(Message(role=role, content=content))

    def truncate_if_needed(self, session_id: str, max_turns: Optional[int] = None) -> None:
        """
        Once a transcript is longer than max_turns (default: system prompt + history_turns),
        keep the system prompt plus the most recent turns.
        """
        transcript = self._sessions.get(session_id)
        if transcript is None:
            return
        ceiling = max_turns if max_turns is not None else self.history_turns + 1
        if len(transcript) > ceiling:
            keep = ceiling - 1
            self._sessions[session_id] = [transcript[0]] + (transcript[-keep:] if keep else [])
            logger.debug(f"Truncated session {session_id} from {len(transcript)} to {ceiling} turns")

    def reset(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"Reset interview session {session_id}")
        if not self._lock_users.get(session_id):
            self._locks.pop(session_id, None)

    def as_payload(self, session_id: str) -> List[dict]:
        """Transcript as OpenAI-style message dicts for the completion request."""
        transcript = self._sessions.get(session_id) or []
        return [msg.model_dump(mode="json") for msg in transcript]
