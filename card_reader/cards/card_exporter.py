"""
Character Card Exporter
======================

Assembles the raw JSON export and the readable text export of a decoded card.
Writing or uploading the exports is left to the caller.
"""

import json
import logging
import re
from datetime import datetime
from typing import Optional, Tuple

from .models import CharacterCard, ExportBundle, RenderedDocument

logger = logging.getLogger(__name__)

DEFAULT_BASENAME = "character"


class CharacterCardExporter:
    """Build export bundles for decoded character cards."""

    @staticmethod
    def serialize(card: CharacterCard) -> str:
        """Serialize a card in its original shape as pretty-printed JSON."""
        return json.dumps(card.to_raw(), indent=2, ensure_ascii=False)

    @classmethod
    def assemble(cls, card: CharacterCard, document: RenderedDocument) -> ExportBundle:
        """
        Pair the raw JSON serialization of a card with its rendered document.

        Args:
            card: Decoded character card
            document: Readable document rendered from the card

        Returns:
            ExportBundle with both exports
        """
        bundle = ExportBundle(
            card=card,
            document=document,
            raw_json=cls.serialize(card),
            readable_text=document.text,
        )
        logger.debug(
            f"Assembled export for '{bundle.card_name}': "
            f"{len(bundle.raw_json)} chars JSON, {len(bundle.readable_text)} chars text"
        )
        return bundle

    @staticmethod
    def sanitize_filename(name: str) -> str:
        """Replace characters that are invalid in file names."""
        safe = re.sub(r'[<>:"/\\|?*]', '_', name)
        # drop control characters, including newlines from multi-line names
        safe = re.sub(r'[\x00-\x1f]', '', safe).strip()
        if len(safe) > 50:
            safe = safe[:50].rstrip()
        return safe or DEFAULT_BASENAME

    @classmethod
    def export_filenames(
        cls,
        bundle: ExportBundle,
        now: Optional[datetime] = None
    ) -> Tuple[str, str]:
        """
        Build the delivery file names for a bundle.

        A time-of-day stamp keeps repeated exports of the same card apart.

        Returns:
            (json_filename, txt_filename)
        """
        stamp = (now or datetime.now()).strftime("%H%M%S")
        base = f"{cls.sanitize_filename(bundle.card_name)}_{stamp}"
        return f"{base}.json", f"{base}_read.txt"
