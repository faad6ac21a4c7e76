"""
Text feature implementations.

Free features only read the active document; premium features replace
its whole content with a transformed version.
"""
import base64
import binascii
import logging
from typing import Callable, Optional

from core.domain.exceptions import FeatureExecutionError
from features.ports.text_editor import TextEditorPort

logger = logging.getLogger(__name__)


class InMemoryTextEditor(TextEditorPort):
    """Editor holding one document in memory; None means no active editor."""

    def __init__(self, text: Optional[str] = None):
        self.text = text

    async def get_text(self) -> Optional[str]:
        return self.text

    async def replace_text(self, text: str) -> None:
        if self.text is None:
            return
        self.text = text


class FreeFeatures:
    """Read-only features available without a license."""

    def __init__(self, editor: TextEditorPort):
        self.editor = editor

    async def character_count(self) -> int:
        text = await self.editor.get_text()
        return len(text) if text is not None else 0

    async def word_count(self) -> int:
        text = await self.editor.get_text()
        if not text:
            return 0
        return len(text.split())


def _base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _base64_decode(text: str) -> str:
    try:
        return base64.b64decode("".join(text.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise FeatureExecutionError("Invalid base64 string") from e


class PremiumFeatures:
    """Whole-document transformations that require a license."""

    def __init__(self, editor: TextEditorPort):
        self.editor = editor

    async def _apply_text_transformation(self, transform: Callable[[str], str]) -> None:
        text = await self.editor.get_text()
        if text is None:
            logger.debug("No active editor, transformation skipped")
            return
        await self.editor.replace_text(transform(text))

    async def convert_to_upper_case(self) -> None:
        await self._apply_text_transformation(str.upper)

    async def convert_to_lower_case(self) -> None:
        await self._apply_text_transformation(str.lower)

    async def base64_encode(self) -> None:
        await self._apply_text_transformation(_base64_encode)

    async def base64_decode(self) -> None:
        await self._apply_text_transformation(_base64_decode)
