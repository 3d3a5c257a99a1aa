from typing import List, Optional, Sequence

from ..models import ChatMessage, ContextChunk, Prompt, ResponseLength

HISTORY_WINDOW = 6

LENGTH_SETTINGS = {
    ResponseLength.SHORT: (
        "Provide a BRIEF, concise answer (2-3 sentences maximum). Focus only on the most essential information.",
        256,
    ),
    ResponseLength.MEDIUM: (
        "Provide a balanced answer that is concise but comprehensive enough to be useful for citation purposes (4-6 sentences).",
        1024,
    ),
    ResponseLength.LONG: (
        "Provide a COMPREHENSIVE, detailed answer. Include context, explanations, and multiple examples if relevant. Aim for thoroughness.",
        2048,
    ),
}

SYSTEM_PROMPT = """You are an expert AI research assistant specializing in machine learning and NLP research papers. Your role is to help researchers find and cite relevant papers accurately.

Guidelines:
- Base your answers ONLY on the provided paper excerpts and context
- Always cite papers when referencing specific concepts, methods, or findings
- If the context doesn't contain relevant information, clearly state that
- Be precise and accurate - this is for academic writing
- When discussing authors, mention their names and affiliations if available
- Format citations naturally in your response, mentioning paper titles
- {length_instruction}"""

USER_PROMPT = """Here are relevant excerpts from research papers:

{context_text}

{history_block}
User's question: {query}

Please provide a clear, accurate answer based on the paper excerpts above. Include specific citations by mentioning paper titles. If the excerpts don't contain relevant information to answer the question, please state that clearly."""


def render_context(chunks: Sequence[ContextChunk]) -> str:
    """Render chunks as "[title - section]" blocks separated by blank lines"""
    return "\n\n".join(f"[{chunk.title} - {chunk.section}]\n{chunk.text}" for chunk in chunks)


def render_history(history: Sequence[ChatMessage], window: int = HISTORY_WINDOW) -> str:
    """Render the most recent messages, oldest first, as "Role: content" lines"""
    recent = list(history)[-window:] if window > 0 else []
    return "\n".join(
        f"{'User' if message.role == 'user' else 'Assistant'}: {message.content}"
        for message in recent
    )


def length_settings(response_length: Optional[str]) -> tuple:
    """Return (instruction, max_tokens) for a response length, defaulting to medium"""
    return LENGTH_SETTINGS[ResponseLength.parse(response_length)]


def build_prompt(
    query: str,
    chunks: Sequence[ContextChunk],
    history: Sequence[ChatMessage],
    response_length: Optional[str] = None,
) -> Prompt:
    """
    Build the system and user prompts for a grounded answer.

    Args:
        query: The user's question
        chunks: Context chunks in the order they should appear
        history: The session's messages, oldest first
        response_length: "short", "medium" or "long"; anything else means medium

    Returns:
        Prompt with the token ceiling matching the response length
    """
    length_instruction, max_tokens = length_settings(response_length)

    history_text = render_history(history)
    history_block = f"Previous conversation context:\n{history_text}\n" if history_text else ""

    return Prompt(
        system=SYSTEM_PROMPT.format(length_instruction=length_instruction),
        user=USER_PROMPT.format(
            context_text=render_context(chunks),
            history_block=history_block,
            query=query,
        ),
        max_tokens=max_tokens,
    )
