import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .arxiv_search import ArxivSearch
from .data.chat_history import create_history_store
from .embeddings import OllamaEmbedder
from .llm_processor import LLMProcessor
from .rag.background import BackgroundTaskQueue
from .rag.rag_engine import RAGEngine
from .routes import config_routes, history_routes, query_routes, setup_routes
from .vector_index import create_semantic_index

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_rag_engine() -> Optional[RAGEngine]:
    """Wire the engine from configuration; returns None if a component cannot start."""
    try:
        rag_engine = RAGEngine(
            searcher=ArxivSearch(),
            embedder=OllamaEmbedder(),
            llm=LLMProcessor(),
            history_store=create_history_store(),
            index=create_semantic_index(),
            queue=BackgroundTaskQueue(),
        )
        logger.info("RAG engine initialized successfully")
        return rag_engine
    except Exception as e:
        logger.error(f"Failed to initialize RAG engine: {e}")
        return None


def create_app(rag_engine: Optional[RAGEngine] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        rag_engine: Engine to serve; built from configuration when omitted
    """
    if rag_engine is None:
        rag_engine = build_rag_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if app.state.rag_engine:
            app.state.rag_engine.close()

    app = FastAPI(
        title="arxium API",
        description="Question answering over machine learning research papers with citations",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.rag_engine = rag_engine

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(query_routes.router)
    app.include_router(history_routes.router)
    app.include_router(setup_routes.router)
    app.include_router(config_routes.router)

    @app.get("/")
    def read_root():
        """Root endpoint providing basic information about the API"""
        index_available = bool(app.state.rag_engine and app.state.rag_engine.index)
        return {
            "message": "Welcome to arxium API",
            "semantic_index": "available" if index_available else "unavailable"
        }

    @app.get("/ping")
    def ping():
        """Health check endpoint."""
        return {"message": "pong"}

    return app


app = create_app()

# Run the API server when this script is executed directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("arxium.app:app", host="0.0.0.0", port=8000)
