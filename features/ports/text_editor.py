"""
Text editor port (interface).

Abstracts the host editor's active document so that feature bodies can
be run against any editor implementation.
"""
from abc import ABC, abstractmethod
from typing import Optional


class TextEditorPort(ABC):
    """Access to the active editor's full text."""

    @abstractmethod
    async def get_text(self) -> Optional[str]:
        """
        Read the active document.

        Returns:
            Full document text, or None when no editor is active
        """
        pass

    @abstractmethod
    async def replace_text(self, text: str) -> None:
        """
        Replace the whole active document.

        Args:
            text: New document text
        """
        pass
