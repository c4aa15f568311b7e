"""
Character Card Parser
====================

Runs the full reading pipeline for one PNG image:

    Scanning -> Located -> Decoded -> Rendered -> Assembled

Any stage may end in a terminal failure, raised as the matching
``CardReadError`` subclass. Nothing is retried; malformed data is not transient.
"""

import logging
from typing import Optional

from .card_exporter import CharacterCardExporter
from .errors import CardReadError, PipelineStage
from .format_detector import FormatDetector
from .metadata_handler import PNGMetadataHandler
from .models import ExportBundle
from .png_chunks import PngChunkReader
from .text_renderer import render_card

logger = logging.getLogger(__name__)


class CharacterCardParser:
    """Read character cards out of PNG images."""

    def __init__(self, verify_crc: bool = False):
        """
        Args:
            verify_crc: Reject PNG chunks whose CRC does not match
        """
        self.verify_crc = verify_crc
        self.stage: Optional[PipelineStage] = None
        self.error: Optional[CardReadError] = None

    def parse(self, png_data: bytes) -> ExportBundle:
        """
        Extract, decode, render and assemble the card embedded in PNG data.

        Args:
            png_data: Complete PNG file contents

        Returns:
            ExportBundle with the raw JSON and readable text exports

        Raises:
            FormatError: If the PNG container is malformed
            NotFoundError: If the image carries no card data
            DecodeError: If the card data is corrupted
        """
        self.error = None
        self.stage = PipelineStage.SCANNING

        try:
            chunks = PngChunkReader(png_data, verify_crc=self.verify_crc)
            located = PNGMetadataHandler.locate(chunks)
            self.stage = PipelineStage.LOCATED
            logger.debug(f"Located '{located.keyword}' payload in {located.chunk_type} chunk")

            card = FormatDetector.decode(located)
            self.stage = PipelineStage.DECODED

            document = render_card(card)
            self.stage = PipelineStage.RENDERED

            bundle = CharacterCardExporter.assemble(card, document)
            self.stage = PipelineStage.ASSEMBLED

        except CardReadError as e:
            logger.warning(f"Card read failed during {e.stage.value}: {e}")
            self.error = e
            self.stage = PipelineStage.FAILED
            raise

        logger.info(f"Read character card '{bundle.card_name}' ({FormatDetector.get_format_name(card.format)})")
        return bundle


def read_card(png_data: bytes, verify_crc: bool = False) -> ExportBundle:
    """Read the character card embedded in PNG data."""
    return CharacterCardParser(verify_crc=verify_crc).parse(png_data)
