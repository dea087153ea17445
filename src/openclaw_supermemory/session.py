"""Current-conversation state shared by the plugin's hooks and tools."""

from dataclasses import dataclass

from .memory.categories import build_document_id


@dataclass
class SessionContext:
    """Holds the host's current session key.

    Only the before-agent-start hook writes it; capture, tools and
    commands read it to target the conversation's memory document.
    """

    session_key: str | None = None

    def update(self, session_key: str | None) -> None:
        if session_key:
            self.session_key = session_key

    @property
    def document_id(self) -> str | None:
        """Storage id for this conversation, or None to let the backend pick one."""
        return build_document_id(self.session_key) if self.session_key else None
