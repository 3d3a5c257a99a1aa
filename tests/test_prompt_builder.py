"""Tests for arxium.rag.prompt_builder and arxium.rag.citations."""

import pytest

from arxium.models import ChatMessage, ContextChunk
from arxium.rag.citations import reduce_citations
from arxium.rag.prompt_builder import build_prompt, render_context


def chunk(paper_id, section="Abstract", title=None, text="Some text."):
    return ContextChunk(
        text=text,
        title=title or f"Paper {paper_id}",
        section=section,
        paper_id=paper_id,
        url=f"https://arxiv.org/abs/{paper_id}",
    )


def conversation(n):
    return [
        ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"msg-{i + 1:02d}")
        for i in range(n)
    ]


class TestResponseLength:
    @pytest.mark.parametrize("length,max_tokens,marker", [
        ("short", 256, "BRIEF"),
        ("medium", 1024, "balanced"),
        ("long", 2048, "COMPREHENSIVE"),
    ])
    def test_length_settings(self, length, max_tokens, marker):
        prompt = build_prompt("q", [chunk("a")], [], length)
        assert prompt.max_tokens == max_tokens
        assert marker in prompt.system

    @pytest.mark.parametrize("length", [None, "", "huge", "SHORTISH"])
    def test_unknown_length_means_medium(self, length):
        assert build_prompt("q", [chunk("a")], [], length).max_tokens == 1024

    def test_length_is_case_insensitive(self):
        assert build_prompt("q", [chunk("a")], [], "LONG").max_tokens == 2048


class TestPromptText:
    def test_context_blocks(self):
        text = render_context([
            chunk("a", title="Attention Is All You Need", text="Transformers."),
            chunk("b", section="Methods", title="BERT", text="Masked LM."),
        ])
        assert text == (
            "[Attention Is All You Need - Abstract]\nTransformers."
            "\n\n"
            "[BERT - Methods]\nMasked LM."
        )

    def test_user_prompt_contains_context_and_question(self):
        prompt = build_prompt("What is attention?", [chunk("a", text="Attention weighs tokens.")], [])
        assert "Attention weighs tokens." in prompt.user
        assert "User's question: What is attention?" in prompt.user
        assert "Previous conversation context" not in prompt.user

    def test_system_prompt_grounding_rules(self):
        prompt = build_prompt("q", [chunk("a")], [])
        assert "ONLY on the provided paper excerpts" in prompt.system
        assert prompt.system.rstrip().endswith(
            "(4-6 sentences)."
        )

    def test_only_last_six_messages(self):
        prompt = build_prompt("q", [chunk("a")], conversation(10))
        assert "Previous conversation context" in prompt.user
        for i in range(1, 5):
            assert f"msg-{i:02d}" not in prompt.user
        kept = [f"msg-{i:02d}" for i in range(5, 11)]
        positions = [prompt.user.index(m) for m in kept]
        assert positions == sorted(positions)

    def test_history_roles(self):
        prompt = build_prompt("q", [chunk("a")], conversation(2))
        assert "User: msg-01" in prompt.user
        assert "Assistant: msg-02" in prompt.user


class TestReduceCitations:
    def test_one_citation_per_paper_first_wins(self):
        citations = reduce_citations([
            chunk("a", section="Abstract (chunk 1)"),
            chunk("b"),
            chunk("a", section="Abstract (chunk 2)"),
        ])
        assert [(c.paper_id, c.section) for c in citations] == [
            ("a", "Abstract (chunk 1)"),
            ("b", "Abstract"),
        ]

    def test_carries_title_and_url(self):
        citation = reduce_citations([chunk("a", title="Deep Residual Learning")])[0]
        assert citation.title == "Deep Residual Learning"
        assert citation.url == "https://arxiv.org/abs/a"

    def test_empty(self):
        assert reduce_citations([]) == []
