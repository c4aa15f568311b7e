"""
PNG Metadata Handler
===================

Locates the character card text chunk (``ccv3`` or ``chara``) among the chunks
of a PNG image.
"""

import logging
import zlib
from typing import Iterable, Optional, Tuple

from .errors import DecodeError, NotFoundError
from .models import CCV3_KEYWORD, CHARA_KEYWORD, LocatedPayload
from .png_chunks import PngChunk, PngChunkReader

logger = logging.getLogger(__name__)

TEXT_CHUNK_TYPES = ("tEXt", "zTXt", "iTXt")


class PNGMetadataHandler:
    """Handle PNG text chunk lookup for character card metadata."""

    @staticmethod
    def split_keyword(chunk: PngChunk) -> Optional[Tuple[str, bytes]]:
        """
        Split a text chunk payload into its keyword and the remaining bytes.

        Returns:
            (keyword, rest) or None if the payload has no NUL separator
        """
        keyword, sep, rest = chunk.payload.partition(b'\x00')
        if not sep:
            return None
        return keyword.decode('latin-1'), rest

    @staticmethod
    def decode_text(chunk_type: str, body: bytes) -> str:
        """
        Decode the text part of a tEXt, zTXt or iTXt chunk.

        Args:
            chunk_type: Chunk type tag
            body: Payload bytes following the keyword separator

        Raises:
            DecodeError: If a compressed or UTF-8 text cannot be decoded
        """
        try:
            if chunk_type == "tEXt":
                return body.decode('latin-1')

            if chunk_type == "zTXt":
                # compression method byte, then zlib stream
                return zlib.decompress(body[1:]).decode('latin-1')

            # iTXt: flag, method, language NUL, translated keyword NUL, text
            compressed = body[:1] == b'\x01'
            _language, _, rest = body[2:].partition(b'\x00')
            _translated, _, text = rest.partition(b'\x00')
            if compressed:
                text = zlib.decompress(text)
            return text.decode('utf-8')

        except zlib.error as e:
            raise DecodeError(f"Failed to inflate {chunk_type} chunk: {e}") from e
        except UnicodeDecodeError as e:
            raise DecodeError(f"{chunk_type} chunk text is not valid UTF-8: {e}") from e

    @classmethod
    def locate(cls, chunks: Iterable[PngChunk]) -> LocatedPayload:
        """
        Select the card payload from a chunk sequence.

        The first ``ccv3`` chunk wins over any ``chara`` chunk, wherever it
        appears; otherwise the first ``chara`` chunk is used.

        Raises:
            NotFoundError: If no ccv3/chara text chunk exists
            DecodeError: If the selected chunk's text cannot be decoded
        """
        chara: Optional[Tuple[PngChunk, bytes]] = None

        for chunk in chunks:
            if chunk.type not in TEXT_CHUNK_TYPES:
                continue

            split = cls.split_keyword(chunk)
            if split is None:
                logger.debug(f"Skipping {chunk.type} chunk without keyword separator")
                continue

            keyword, body = split
            key_lower = keyword.lower()

            if key_lower == CCV3_KEYWORD:
                logger.debug(f"Found {chunk.type} chunk with keyword '{keyword}'")
                return LocatedPayload(
                    keyword=CCV3_KEYWORD,
                    chunk_type=chunk.type,
                    text=cls.decode_text(chunk.type, body),
                )

            if key_lower == CHARA_KEYWORD and chara is None:
                logger.debug(f"Found {chunk.type} chunk with keyword '{keyword}'")
                chara = (chunk, body)

        if chara is not None:
            chunk, body = chara
            return LocatedPayload(
                keyword=CHARA_KEYWORD,
                chunk_type=chunk.type,
                text=cls.decode_text(chunk.type, body),
            )

        raise NotFoundError("No character card data (ccv3/chara) found in image")

    @classmethod
    def read_card_text(cls, png_data: bytes, verify_crc: bool = False) -> LocatedPayload:
        """
        Scan PNG data and return the selected card payload.

        Raises:
            FormatError: If the PNG container is malformed
            NotFoundError: If no card chunk exists
            DecodeError: If the selected chunk's text cannot be decoded
        """
        return cls.locate(PngChunkReader(png_data, verify_crc=verify_crc))
