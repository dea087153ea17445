"""Turn-based schedule for injecting the full user profile."""

MIN_RECALL_PROMPT_LENGTH = 5


def should_include_full_profile(turn: int, profile_frequency: int) -> bool:
    """Whether the persistent and recent profile go into this turn's context.

    The profile is always sent on the first turn and then every
    ``profile_frequency`` user turns. Other turns only get search hits.
    """
    return turn <= 1 or turn % profile_frequency == 0


def needs_recall(prompt: str | None) -> bool:
    """Prompts shorter than a few characters are not worth a lookup."""
    return bool(prompt) and len(prompt) >= MIN_RECALL_PROMPT_LENGTH
