import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..rag.rag_engine import RAGEngine
from .dependencies import get_dependencies

# Setup logging
logger = logging.getLogger("history_routes")

router = APIRouter(
    prefix="/api",
    tags=["history"],
)


def _missing_session():
    return JSONResponse(status_code=400, content={"error": "Missing session_id"})


@router.get("/history/")
@router.get("/history/{session_id}")
def get_history(session_id: str = "", rag_engine: RAGEngine = Depends(get_dependencies)):
    """Return the session's messages in the order they were added"""
    if not session_id.strip():
        return _missing_session()

    try:
        history = rag_engine.get_history(session_id)
    except Exception as e:
        logger.error(f"Error fetching history: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch history", "message": str(e)},
        )
    return [message.model_dump() for message in history]


@router.post("/clear/")
@router.post("/clear/{session_id}")
def clear_history(session_id: str = "", rag_engine: RAGEngine = Depends(get_dependencies)):
    """Delete every message of a session"""
    if not session_id.strip():
        return _missing_session()

    try:
        rag_engine.clear_history(session_id)
    except Exception as e:
        logger.error(f"Error clearing history: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to clear history", "message": str(e)},
        )
    return {"message": "History cleared", "session_id": session_id}
