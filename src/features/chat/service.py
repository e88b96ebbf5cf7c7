"""Chat service: session bookkeeping around the AI backend."""

import logging
from datetime import datetime, timedelta, timezone

from src.core.exceptions import (
    AuthFailureError,
    ErrorKind,
    InvalidRequestError,
    OverloadedError,
    UnknownChatError,
    classify_error,
)
from src.core.gemini import ResponseSource

from .fallback import get_fallback_response
from .memory import SessionStore
from .models import ChatResponse, ChatSession

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a helpful, friendly customer support chatbot.
You should:
- Be concise but helpful
- Ask clarifying questions when needed
- Provide practical solutions
- Be polite and professional
- If you don't know something, admit it and suggest alternatives"""


def build_prompt(
    session: ChatSession,
    message: str,
    history_window: int = 10,
    context: str | None = None,
) -> str:
    """
    Build the single-turn prompt sent to the model.

    Args:
        session: Session whose transcript already ends with the user message
        message: The user's latest message
        history_window: Number of trailing transcript messages to include
        context: Optional description of the host page

    Returns:
        Prompt text
    """
    recent = session.messages[-history_window:] if history_window > 0 else []
    history = "\n".join(f"{msg.role}: {msg.content}" for msg in recent)

    prompt = SYSTEM_PROMPT
    if context and context.strip():
        prompt += f"\n\nPage context:\n{context.strip()}"
    prompt += f"\n\nPrevious conversation:\n{history}\n\nUser's latest message: {message}"
    return prompt


class ChatService:
    """Handle one chat turn: validate, load session, answer, record."""

    def __init__(
        self,
        store: SessionStore,
        source: ResponseSource | None,
        history_window: int = 10,
        max_idle: timedelta = timedelta(hours=1),
    ):
        self.store = store
        self.source = source
        self.history_window = history_window
        self.max_idle = max_idle

    @property
    def ai_available(self) -> bool:
        return self.source is not None and self.source.is_available

    async def chat(
        self,
        message: str | None,
        session_id: str | None = None,
        context: str | None = None,
    ) -> ChatResponse:
        """
        Process a chat message.

        Raises:
            InvalidRequestError: message missing or blank
            AuthFailureError: backend rejected credentials
            OverloadedError: backend quota or rate limit hit
            UnknownChatError: any other backend failure
        """
        if not message or not message.strip():
            raise InvalidRequestError()

        if not session_id:
            session_id = self.store.generate_session_id()

        async with self.store.lock(session_id):
            session = self.store.get_or_create(session_id)

            if not self.ai_available:
                return self._fallback_reply(session, message)

            self.store.append_message(session, "user", message)
            prompt = build_prompt(session, message, self.history_window, context)

            try:
                reply = await self.source.generate(prompt)
            except Exception as e:
                # Keep the unanswered user message in the transcript
                self.store.save(session)
                raise self._map_error(e) from e

            self.store.append_message(session, "assistant", reply)
            self.store.save(session)
            self.store.sweep_expired(self.max_idle)

        return ChatResponse(
            response=reply,
            session_id=session_id,
            is_ai=True,
            source="ai",
            timestamp=datetime.now(timezone.utc),
        )

    def _fallback_reply(self, session: ChatSession, message: str) -> ChatResponse:
        logger.info(f"[{session.id}] Using fallback response (no AI configured)")
        reply = get_fallback_response()

        self.store.append_message(session, "user", message)
        self.store.append_message(session, "assistant", reply)
        self.store.save(session)

        return ChatResponse(
            response=reply,
            session_id=session.id,
            is_ai=False,
            source="fallback",
        )

    @staticmethod
    def _map_error(error: Exception) -> Exception:
        kind = classify_error(error)
        logger.error(f"Chat error ({kind.value}): {type(error).__name__}: {error}")

        if kind is ErrorKind.AUTH:
            return AuthFailureError()
        if kind is ErrorKind.OVERLOADED:
            return OverloadedError()
        return UnknownChatError(fallback=get_fallback_response())
