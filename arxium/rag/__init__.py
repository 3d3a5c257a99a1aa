"""
Query understanding and context assembly.

- author_detector: author vs. topical query classification
- context_assembler: merge arXiv results with the semantic index fallback
- prompt_builder: system/user prompts sized to the response length
- citations: citation deduplication
- background: fire-and-forget task queue for index backfill
- rag_engine: request orchestration
"""
