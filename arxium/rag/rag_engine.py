import logging
from typing import Dict, List, Optional

from .. import config
from ..arxiv_search import ArxivSearch
from ..data.chat_history import ChatHistoryStore
from ..embeddings import OllamaEmbedder
from ..errors import NoContextFound
from ..llm_processor import LLMProcessor
from ..models import ChatMessage, ExternalPaper, QueryResponse
from ..seed_index import SeedIndexer
from ..vector_index import SemanticIndex
from .background import BackgroundTaskQueue
from .citations import reduce_citations
from .context_assembler import ContextAssembler
from .prompt_builder import build_prompt

logger = logging.getLogger(__name__)


class RAGEngine:
    """
    Retrieval-Augmented Generation engine for ML research papers.

    This class handles:
    1. Searching arXiv (author-aware) for fresh papers
    2. Assembling context, with the semantic index as a fallback
    3. Building the grounded prompt and calling the LLM
    4. Reducing citations and persisting the conversation turn
    """

    def __init__(
        self,
        searcher: ArxivSearch,
        embedder: OllamaEmbedder,
        llm: LLMProcessor,
        history_store: ChatHistoryStore,
        index: Optional[SemanticIndex] = None,
        queue: Optional[BackgroundTaskQueue] = None,
        max_results: int = config.ARXIV_MAX_RESULTS,
    ):
        self.searcher = searcher
        self.embedder = embedder
        self.llm = llm
        self.history_store = history_store
        self.index = index
        self.queue = queue or BackgroundTaskQueue()
        self.max_results = max_results
        self.assembler = ContextAssembler(index, embedder, self.queue)
        logger.info(f"RAG Engine initialized (semantic index: {index.name if index else 'unavailable'})")

    def _load_history(self, session_id: str) -> List[ChatMessage]:
        try:
            return self.history_store.get(session_id)
        except Exception as e:
            logger.error(f"Error fetching history: {e}")
            return []

    def _search_papers(self, query: str) -> List[ExternalPaper]:
        try:
            logger.info(f"Searching arXiv for: {query}")
            papers = self.searcher.search(query, self.max_results)
        except Exception as e:
            logger.error(f"arXiv search error: {e}")
            return []
        logger.info(f"Found {len(papers)} papers from arXiv")
        if papers:
            logger.info(f"arXiv papers found: {[paper.title for paper in papers[:3]]}")
        return papers

    def _save_turn(self, session_id: str, query: str, answer: str) -> None:
        try:
            self.history_store.append(session_id, ChatMessage(role="user", content=query))
            self.history_store.append(session_id, ChatMessage(role="assistant", content=answer))
        except Exception as e:
            logger.error(f"Error saving messages: {e}")

    def answer(self, query: str, session_id: str, response_length: Optional[str] = None) -> QueryResponse:
        """
        Answer a question about ML research papers.

        Args:
            query: The user's question
            session_id: Conversation the turn belongs to
            response_length: "short", "medium" or "long" (default medium)

        Returns:
            QueryResponse with the answer and one citation per paper

        Raises:
            NoContextFound: when neither arXiv nor the index produced context
            UpstreamError: when the language model call fails
        """
        history = self._load_history(session_id)
        papers = self._search_papers(query)

        context_chunks = self.assembler.assemble(query, papers)
        if not context_chunks:
            raise NoContextFound(query)

        prompt = build_prompt(query, context_chunks, history, response_length)
        answer = self.llm.generate(prompt.system, prompt.user, prompt.max_tokens)

        citations = reduce_citations(context_chunks)
        self._save_turn(session_id, query, answer)

        return QueryResponse(answer=answer, citations=citations, session_id=session_id)

    def get_history(self, session_id: str) -> List[ChatMessage]:
        return self.history_store.get(session_id)

    def clear_history(self, session_id: str) -> None:
        self.history_store.clear(session_id)

    def setup_index(self) -> Dict[str, int]:
        """Seed the semantic index with the bundled paper corpus"""
        return SeedIndexer(self.index, self.embedder).run()

    def close(self) -> None:
        """Release resources; waits for pending backfill jobs"""
        self.queue.shutdown(wait=True)
        logger.info("RAG engine resources released")
