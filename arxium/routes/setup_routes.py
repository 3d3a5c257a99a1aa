import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..errors import IndexUnavailable, UpstreamError
from ..rag.rag_engine import RAGEngine
from .dependencies import get_dependencies

# Setup logging
logger = logging.getLogger("setup_routes")

router = APIRouter(
    prefix="/api",
    tags=["setup"],
)


@router.post("/setup")
def setup_index(rag_engine: RAGEngine = Depends(get_dependencies)):
    """Embed the seed papers and store them in the semantic index"""
    if rag_engine.index is None:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Vectorize not available",
                "message": "Semantic index is not configured. Set SEMANTIC_INDEX=milvus with "
                           "ZILLIZ_CLOUD_URI and ZILLIZ_CLOUD_TOKEN in the .env file, or SEMANTIC_INDEX=memory.",
            },
        )

    try:
        result = rag_engine.setup_index()
    except IndexUnavailable as e:
        logger.error(f"Semantic index upsert error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to store vectors", "message": e.user_message},
        )
    except UpstreamError as e:
        logger.error(f"Embedding seed papers failed: {e}")
        return JSONResponse(
            status_code=502,
            content={"error": "Embedding failed", "message": e.user_message},
        )

    return {"message": "Setup complete", **result}
