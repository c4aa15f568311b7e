"""
Card Format Detector
===================

Decodes the located card payload (Base64 JSON) and dispatches on the schema
version selected by the chunk keyword.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from .errors import DecodeError
from .metadata_handler import PNGMetadataHandler
from .models import CardData, CardFormat, CharacterCard, LocatedPayload

logger = logging.getLogger(__name__)


class FormatDetector:
    """Decode card payloads into schema-tagged character cards."""

    @staticmethod
    def decode_base64(text: str) -> str:
        """
        Decode standard Base64 into UTF-8 text.

        Raises:
            DecodeError: On invalid characters, bad padding or non UTF-8 bytes
        """
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Card payload is not valid Base64: {e}") from e

        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecodeError(f"Card payload is not valid UTF-8: {e}") from e

    @staticmethod
    def parse_json(text: str) -> Dict[str, Any]:
        """
        Parse card JSON, requiring an object at the top level.

        Raises:
            DecodeError: On malformed JSON or a non-object document
        """
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Failed to parse card JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise DecodeError(f"Card data is not a JSON object (got {type(parsed).__name__})")
        return parsed

    @classmethod
    def decode(cls, located: LocatedPayload) -> CharacterCard:
        """
        Decode a located payload into a CharacterCard.

        ``ccv3`` payloads are V3 envelopes whose nested ``data`` object holds the
        character; ``chara`` payloads are read as flat V2 objects.

        Raises:
            DecodeError: If the payload cannot be decoded or has the wrong shape
        """
        card_format = located.format
        parsed = cls.parse_json(cls.decode_base64(located.text))

        try:
            if card_format is CardFormat.SILLYTAVERN_V3:
                card = cls._from_v3(parsed)
            else:
                card = CharacterCard(format=card_format, data=CardData.model_validate(parsed))
        except ValidationError as e:
            raise DecodeError(f"{cls.get_format_name(card_format)} card has invalid fields: {e}") from e

        logger.info(
            f"Decoded {cls.get_format_name(card_format)} card "
            f"'{card.name or ''}' ({len(card.data.extra_fields)} extra fields)"
        )
        return card

    @staticmethod
    def _from_v3(parsed: Dict[str, Any]) -> CharacterCard:
        data = parsed.get("data")
        if not isinstance(data, dict):
            raise DecodeError("V3 card is missing its 'data' object")

        envelope = {key: value for key, value in parsed.items() if key != "data"}
        return CharacterCard(
            format=CardFormat.SILLYTAVERN_V3,
            data=CardData.model_validate(data),
            envelope=envelope,
        )

    @classmethod
    def detect(cls, png_data: bytes, verify_crc: bool = False) -> CharacterCard:
        """Locate and decode the card embedded in PNG data."""
        return cls.decode(PNGMetadataHandler.read_card_text(png_data, verify_crc=verify_crc))

    @classmethod
    def get_format_name(cls, format: CardFormat) -> str:
        """Get human-readable format name."""
        names = {
            CardFormat.SILLYTAVERN_V2: "SillyTavern V2",
            CardFormat.SILLYTAVERN_V3: "SillyTavern V3",
        }
        return names.get(format, "Unknown")
