"""
HTTP API for the Policy Lens application.

This module exposes the analysis and chat helpers through FastAPI so
that clients other than the Streamlit UI can use them.  The server
can be run directly via uvicorn or programmatically by calling the
``run`` function defined below.

Endpoints:

* **GET /health** – Return a basic health status.

* **POST /analyze** – Run a comparative analysis.  The body contains
  a ``topic`` string and a ``countries`` list.  The response is the
  analysis JSON plus a ``sessionId`` identifying a chat session seeded
  with that analysis.

* **POST /chat/{session_id}** – Send a follow-up question to the chat
  session created by ``/analyze``.  Returns ``{"reply": ...}``.

* **DELETE /chat/{session_id}** – Discard a chat session.

Chat sessions are kept in memory on ``app.state.sessions`` and are lost
when the process exits.  At most ``POLICY_MAX_SESSIONS`` are held; the
oldest session is dropped when a new one would exceed the limit.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .analysis_service import generate_analysis
from .chat_agent import ChatSession, start_chat
from .config import load_settings
from .errors import AnalysisError, ChatError, ValidationError

logger = logging.getLogger(__name__)


class AnalyzeRequest(BaseModel):
    topic: str = ''
    countries: List[str] = []


class ChatRequest(BaseModel):
    message: str = ''


app = FastAPI(title="Policy Lens API", version="1.0.0")
app.state.sessions = OrderedDict()
_sessions_lock = threading.Lock()

# Allow the Streamlit frontend on another port to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event() -> None:
    settings = load_settings()
    logger.info(
        f"Policy Lens API startup complete (analysis model {settings.analysis_model}, "
        f"chat model {settings.chat_model}, baseline {settings.baseline_country})"
    )


@app.get("/health", response_model=Dict[str, Any])
async def health_check() -> Dict[str, Any]:
    """Return a basic health status for liveness checks."""
    return {
        "status": "healthy",
        "server": "PolicyLens",
    }


@app.post("/analyze", response_model=Dict[str, Any])
def analyze(request: AnalyzeRequest) -> Dict[str, Any]:
    """Generate an analysis and seed a chat session from it.

    Returns 400 for a missing topic or empty country list and 502 when
    the model call fails.
    """
    try:
        analysis = generate_analysis(request.topic, request.countries)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e))
    session_id = register_session(start_chat(analysis))
    result = analysis.to_dict()
    result["sessionId"] = session_id
    return result


def register_session(session: ChatSession) -> str:
    """Store a chat session, evicting the oldest ones past ``max_sessions``."""
    session_id = uuid.uuid4().hex
    limit = load_settings().max_sessions
    with _sessions_lock:
        sessions = app.state.sessions
        sessions[session_id] = session
        while len(sessions) > limit:
            evicted, _ = sessions.popitem(last=False)
            logger.info(f"Evicted chat session {evicted} (limit {limit})")
    return session_id


@app.post("/chat/{session_id}", response_model=Dict[str, Any])
def chat(session_id: str, request: ChatRequest) -> Dict[str, Any]:
    """Send one message to an existing chat session."""
    with _sessions_lock:
        session = app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Chat session not found")
    try:
        reply = session.send_message(request.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ChatError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"reply": reply}


@app.delete("/chat/{session_id}", response_model=Dict[str, Any])
def end_chat(session_id: str) -> Dict[str, Any]:
    """Discard a chat session once the client is done with it."""
    with _sessions_lock:
        session = app.state.sessions.pop(session_id, None)
    if session is None:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return {"deleted": session_id}


def run(host: str = "0.0.0.0", port: int = 8001) -> None:
    """Run the API server using uvicorn."""
    import uvicorn  # type: ignore

    logger.info(f"Starting Policy Lens API on {host}:{port}")
    uvicorn.run(
        "policy_lens.backend.api_server:app",
        host=host,
        port=port,
        log_level="info",
        reload=False,
    )
