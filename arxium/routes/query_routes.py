import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..errors import NoContextFound, UpstreamError
from ..models import QueryRequest, QueryResponse
from ..rag.rag_engine import RAGEngine
from .dependencies import get_dependencies

# Setup logging
logger = logging.getLogger("query_routes")

router = APIRouter(
    prefix="/api",
    tags=["query"],
)


@router.post("/query", response_model=QueryResponse)
def query_papers(request: QueryRequest, rag_engine: RAGEngine = Depends(get_dependencies)):
    """
    Answer a question using arXiv papers and the semantic index as context.

    Returns:
        The answer with one citation per paper used as context
    """
    if not (request.query or "").strip() or not (request.session_id or "").strip():
        return JSONResponse(
            status_code=400,
            content={"error": "Missing query or session_id"},
        )

    try:
        return rag_engine.answer(request.query, request.session_id, request.response_length)
    except NoContextFound as e:
        logger.info(f"No context found for query: '{request.query}'")
        return JSONResponse(
            status_code=404,
            content={"error": "No papers found", "message": e.user_message},
        )
    except UpstreamError as e:
        logger.error(f"Answer generation failed: {e}")
        return JSONResponse(
            status_code=502,
            content={"error": "Generation failed", "message": e.user_message},
        )
