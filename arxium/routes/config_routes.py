from fastapi import APIRouter, Request

from .. import config

router = APIRouter(
    prefix="/api",
    tags=["configuration"],
)


@router.get("/config")
def get_config(request: Request):
    """Get the current configuration of the Q&A system"""
    rag_engine = getattr(request.app.state, "rag_engine", None)

    if not rag_engine:
        return {
            "llm_model": config.LLM_MODEL,
            "embedding_model": config.EMBEDDING_MODEL,
            "semantic_index": "unavailable",
            "history_store": None
        }

    return {
        "llm_model": rag_engine.llm.model_name,
        "embedding_model": rag_engine.embedder.model_name,
        "semantic_index": rag_engine.index.name if rag_engine.index else "unavailable",
        "history_store": rag_engine.history_store.name
    }
