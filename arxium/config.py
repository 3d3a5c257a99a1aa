import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

# arXiv API settings
ARXIV_API_URL = os.getenv("ARXIV_API_URL", "https://export.arxiv.org/api/query")
ARXIV_TIMEOUT = float(os.getenv("ARXIV_TIMEOUT", "30"))
ARXIV_MAX_RESULTS = int(os.getenv("ARXIV_MAX_RESULTS", "10"))  # Over-fetch, author filtering trims it
ARXIV_USER_AGENT = os.getenv("ARXIV_USER_AGENT", "arxium/1.0")

# Ollama API settings
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")
LLM_MODEL = os.getenv("LLM_MODEL", "llama3.2")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.1"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "120"))
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "nomic-embed-text")
EMBEDDING_DIM = int(os.getenv("EMBEDDING_DIM", "768"))  # Must match the embedding model
EMBEDDING_MAX_TOKENS = int(os.getenv("EMBEDDING_MAX_TOKENS", "8192"))
EMBEDDING_TIMEOUT = float(os.getenv("EMBEDDING_TIMEOUT", "60"))

# Semantic index: "milvus", "memory" or "none"
SEMANTIC_INDEX = os.getenv("SEMANTIC_INDEX", "milvus").lower()

# Zilliz Cloud settings
ZILLIZ_CLOUD_URI = os.getenv("ZILLIZ_CLOUD_URI", "")  # From .env file
ZILLIZ_CLOUD_TOKEN = os.getenv("ZILLIZ_CLOUD_TOKEN", "")  # From .env file
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "paper_embeddings")

# Chat history: "file" or "memory"
HISTORY_STORE = os.getenv("HISTORY_STORE", "file").lower()
HISTORY_DIR = os.getenv("HISTORY_DIR", os.path.join(DATA_DIR, "sessions"))

# Heuristic tables and seed corpus
AUTHOR_HEURISTICS_FILE = os.getenv(
    "AUTHOR_HEURISTICS_FILE", os.path.join(DATA_DIR, "author_heuristics.json")
)
SEED_PAPERS_FILE = os.getenv("SEED_PAPERS_FILE", os.path.join(DATA_DIR, "seed_papers.json"))

BACKGROUND_WORKERS = int(os.getenv("BACKGROUND_WORKERS", "2"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
