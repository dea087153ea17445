"""Tests for category detection and document ids."""

import pytest

from openclaw_supermemory.memory import MemoryCategory, build_document_id, detect_category


class TestDetectCategory:
    """Tests for detect_category."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("I prefer dark mode", MemoryCategory.PREFERENCE),
            ("I LOVE pizza", MemoryCategory.PREFERENCE),
            ("We decided to use Postgres", MemoryCategory.DECISION),
            ("We will use Rust for the backend", MemoryCategory.DECISION),
            ("Going with option B", MemoryCategory.DECISION),
            ("Call me on +14155552671", MemoryCategory.ENTITY),
            ("Reach me at jo@example.com", MemoryCategory.ENTITY),
            ("The dog is called Rex", MemoryCategory.ENTITY),
            ("The server has 8 cores", MemoryCategory.FACT),
            ("ok, thanks", MemoryCategory.OTHER),
            ("", MemoryCategory.OTHER),
        ],
    )
    def test_categories(self, text: str, expected: MemoryCategory):
        assert detect_category(text) is expected

    def test_preference_wins_over_decision(self):
        """The first matching rule wins."""
        assert detect_category("I prefer the plan we decided on") is MemoryCategory.PREFERENCE

    def test_entity_wins_over_fact(self):
        """'is called' is an entity even though 'is' marks a fact."""
        assert detect_category("My cat is called Miso") is MemoryCategory.ENTITY

    def test_deterministic(self):
        text = "The team has decided on Friday releases"
        assert detect_category(text) is detect_category(text)


class TestBuildDocumentId:
    """Tests for build_document_id."""

    def test_prefix(self):
        assert build_document_id("abc") == "session_abc"

    def test_replaces_punctuation(self):
        assert build_document_id("agent:main:telegram:42") == "session_agent_main_telegram_42"

    def test_collapses_and_trims_underscores(self):
        assert build_document_id("--weird//key--") == "session_weird_key"
        assert build_document_id("a__b") == "session_a_b"

    def test_idempotent(self):
        key = "agent/main:chat#7"
        assert build_document_id(key) == build_document_id(key)

    def test_punctuation_only_differences_collide(self):
        """Lossy sanitization: these keys share one document."""
        assert build_document_id("abc-123") == build_document_id("abc_123")

    def test_empty_key(self):
        assert build_document_id("") == "session_"
