"""
Character Card Reading
======================

Extracts SillyTavern character cards embedded in PNG images as base64-encoded
JSON text chunks, and renders them as JSON and readable text exports.

Supports:
- SillyTavern V3 cards (``ccv3`` keyword, enveloped ``data`` object)
- SillyTavern V2 cards (``chara`` keyword, flat object)
"""

from .card_exporter import CharacterCardExporter
from .card_parser import CharacterCardParser, read_card
from .errors import CardReadError, DecodeError, FormatError, NotFoundError, PipelineStage
from .format_detector import FormatDetector
from .metadata_handler import PNGMetadataHandler
from .models import (
    CardData,
    CardFormat,
    CharacterCard,
    DocumentSection,
    ExportBundle,
    LocatedPayload,
    RenderedDocument,
)
from .png_chunks import PngChunk, PngChunkReader, iter_chunks
from .text_renderer import parse_document, render_card

__all__ = [
    'CharacterCardExporter',
    'CharacterCardParser',
    'read_card',
    'CardReadError',
    'DecodeError',
    'FormatError',
    'NotFoundError',
    'PipelineStage',
    'FormatDetector',
    'PNGMetadataHandler',
    'CardData',
    'CardFormat',
    'CharacterCard',
    'DocumentSection',
    'ExportBundle',
    'LocatedPayload',
    'RenderedDocument',
    'PngChunk',
    'PngChunkReader',
    'iter_chunks',
    'parse_document',
    'render_card',
]
