from fastapi import HTTPException, Request

from ..rag.rag_engine import RAGEngine


def get_dependencies(request: Request) -> RAGEngine:
    """Helper function to get the RAG engine attached to the running app"""
    rag_engine = getattr(request.app.state, "rag_engine", None)
    if rag_engine is None:
        raise HTTPException(status_code=500, detail="RAG engine not initialized")
    return rag_engine
