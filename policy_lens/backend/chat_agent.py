"""
Follow-up chat assistant seeded with a completed analysis.

A :class:`ChatSession` is an explicitly owned handle: the caller keeps
it (in Streamlit session state or in the API server's registry) and
replaces it whenever a new analysis is produced.  Turn history lives
on the provider side and is chained through ``previous_response_id``.
The session also keeps a local transcript for display.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, List, Optional

from .analysis_service import get_client
from .config import Settings, load_settings
from .errors import ChatError, ValidationError
from .models import FullAnalysis
from .parsers import extract_output_text
from .prompts import CHAT_GREETING, build_chat_instructions

logger = logging.getLogger(__name__)

CHAT_FAILED_MESSAGE = 'Failed to get a response from the chat agent.'
CHAT_APOLOGY = 'Sorry, I encountered an error. Please try again.'


@dataclass
class ChatMessage:
    sender: str  # 'user' or 'agent'
    text: str


class ChatSession:
    """Stateful multi-turn conversation about one analysis.

    Turns on one session are serialised with a lock; each request
    chains on the response id of the turn before it.
    """

    def __init__(self, client: Any, model: str, instructions: str) -> None:
        self.client = client
        self.model = model
        self.instructions = instructions
        self.previous_response_id: Optional[str] = None
        self.messages: List[ChatMessage] = [ChatMessage('agent', CHAT_GREETING)]
        self._lock = threading.Lock()

    def send_message(self, message: str) -> str:
        """Send one user turn and return the assistant's reply."""
        if not message or not message.strip():
            raise ValidationError('Message must not be empty.')
        with self._lock:
            self.messages.append(ChatMessage('user', message))
            try:
                if self.client is None:
                    self.client = get_client()
                kwargs = {
                    'model': self.model,
                    'instructions': self.instructions,
                    'input': message,
                }
                if self.previous_response_id:
                    kwargs['previous_response_id'] = self.previous_response_id
                response = self.client.responses.create(**kwargs)
                reply = extract_output_text(response)
            except Exception as e:
                logger.error(f"Error sending chat message: {e}")
                raise ChatError(CHAT_FAILED_MESSAGE) from e
            self.previous_response_id = getattr(response, 'id', None)
            self.messages.append(ChatMessage('agent', reply))
            return reply

    def reset(self) -> None:
        """Forget the conversation and start again from the greeting."""
        with self._lock:
            self.previous_response_id = None
            self.messages = [ChatMessage('agent', CHAT_GREETING)]


def start_chat(
    analysis: FullAnalysis,
    client: Any = None,
    settings: Optional[Settings] = None,
) -> ChatSession:
    """Create a chat session whose context is the given analysis.

    No request is made until the first message is sent, so a missing
    API key surfaces as a :class:`ChatError` on that first turn.
    """
    settings = settings or load_settings()
    instructions = build_chat_instructions(analysis, settings.baseline_country)
    session = ChatSession(client=client, model=settings.chat_model, instructions=instructions)
    logger.info(f"Started chat session over {len(analysis.contracts)} policies")
    return session
