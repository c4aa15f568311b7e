"""
PNG Chunk Reader
================

Walks the PNG container format over an in-memory buffer and yields its chunks.
Pixel data is never decoded.
"""

import logging
import struct
import zlib
from dataclasses import dataclass
from typing import Iterator

from .errors import FormatError

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# length (4) + type (4)
_HEADER = struct.Struct(">I4s")
_CRC = struct.Struct(">I")


@dataclass(frozen=True)
class PngChunk:
    """A single PNG chunk with its raw payload."""
    type: str
    length: int
    payload: bytes
    crc: int

    def crc_matches(self) -> bool:
        """Check the stored CRC-32 against type + payload."""
        computed = zlib.crc32(self.type.encode('latin-1') + self.payload) & 0xFFFFFFFF
        return computed == self.crc


class PngChunkReader:
    """
    Lazy, restartable iterator over the chunks of a PNG buffer.

    The signature is checked on construction; each call to ``iter()`` starts a
    fresh scan from the first chunk. Scanning stops after ``IEND`` or at the end
    of the buffer.
    """

    def __init__(self, png_data: bytes, verify_crc: bool = False):
        """
        Args:
            png_data: Complete PNG file contents
            verify_crc: Reject chunks whose CRC-32 does not match

        Raises:
            FormatError: If the buffer does not start with the PNG signature
        """
        if not isinstance(png_data, (bytes, bytearray, memoryview)):
            raise FormatError(f"Expected PNG bytes, got {type(png_data).__name__}")

        self._data = bytes(png_data)
        self.verify_crc = verify_crc

        if not self._data.startswith(PNG_SIGNATURE):
            raise FormatError("Not a valid PNG image (bad signature)")

    def __iter__(self) -> Iterator[PngChunk]:
        data = self._data
        end = len(data)
        offset = len(PNG_SIGNATURE)

        while offset < end:
            if offset + _HEADER.size > end:
                raise FormatError(f"Truncated chunk header at offset {offset}")

            length, raw_type = _HEADER.unpack_from(data, offset)
            chunk_type = raw_type.decode('latin-1')
            payload_start = offset + _HEADER.size
            payload_end = payload_start + length

            if payload_end + _CRC.size > end:
                raise FormatError(
                    f"Chunk '{chunk_type}' at offset {offset} declares {length} bytes, "
                    f"only {max(end - payload_start - _CRC.size, 0)} available"
                )

            (crc,) = _CRC.unpack_from(data, payload_end)
            chunk = PngChunk(
                type=chunk_type,
                length=length,
                payload=data[payload_start:payload_end],
                crc=crc,
            )

            if self.verify_crc and not chunk.crc_matches():
                raise FormatError(f"CRC mismatch for chunk '{chunk_type}' at offset {offset}")

            yield chunk

            if chunk_type == "IEND":
                return
            offset = payload_end + _CRC.size

        logger.debug("Reached end of PNG buffer without IEND chunk")


def iter_chunks(png_data: bytes, verify_crc: bool = False) -> Iterator[PngChunk]:
    """Iterate over the chunks of a PNG buffer."""
    return iter(PngChunkReader(png_data, verify_crc=verify_crc))
