"""Handles a card reading request from a Discord message."""

import io
import logging
from typing import List

import discord

from ..cards import (
    CardReadError,
    CharacterCardExporter,
    CharacterCardParser,
    DecodeError,
    ExportBundle,
    FormatError,
    NotFoundError,
)
from ..config import SystemConfig
from .image_handler import ImageDownloadError, ImageHandler

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "⚠️ Please attach a character card image or reply to a message with one."
READING_MESSAGE = "🔍 Reading character card, please wait..."
UPLOAD_FAILED_MESSAGE = "⚠️ Some files failed to upload, please check the logs."


def describe_error(error: CardReadError) -> str:
    """Turn a card read failure into a single user-facing message."""
    if isinstance(error, FormatError):
        return "this image is not a valid PNG file"
    if isinstance(error, NotFoundError):
        return "no character card data found in this image"
    if isinstance(error, DecodeError):
        return "the character card data is corrupted"
    return str(error)


def build_preview(bundle: ExportBundle) -> str:
    """Short text summary sent alongside the export files."""
    creator = bundle.card.data.creator or "Unknown"
    return (
        f"✅ Parsed: {bundle.card_name}\n"
        f"Creator: {creator}\n"
        f"Characters: {len(bundle.readable_text)}\n"
        f"(See the attached files for details)"
    )


class CardRequestHandler:
    """Downloads, parses and replies with the exports of one card image."""

    def __init__(self, config: SystemConfig, image_handler: ImageHandler):
        self.config = config
        self.image_handler = image_handler

    async def handle(self, message: discord.Message) -> bool:
        """
        Process a card reader command.

        Args:
            message: Discord message that triggered the command

        Returns:
            True if both export files were sent
        """
        image_url = await self.image_handler.find_image_url(message)
        if not image_url:
            await message.reply(NO_IMAGE_MESSAGE)
            return False

        await message.reply(READING_MESSAGE)

        try:
            png_data = await self.image_handler.download(image_url)
        except ImageDownloadError as e:
            logger.warning(f"Image download failed for message {message.id}: {e}")
            await message.reply(f"❌ Image download failed: {e}")
            return False

        parser = CharacterCardParser(verify_crc=self.config.bot.verify_crc)
        try:
            bundle = parser.parse(png_data)
        except CardReadError as e:
            await message.reply(f"❌ Failed to read card: {describe_error(e)}")
            return False

        try:
            await message.reply(files=self._build_files(bundle))
        except discord.HTTPException as e:
            logger.error(f"Failed to upload export files: {e}")
            await message.reply(UPLOAD_FAILED_MESSAGE)
            return False

        logger.info(f"Sent exports for card '{bundle.card_name}' to {message.author}")

        if self.config.reader.text_preview:
            await message.reply(build_preview(bundle))
        return True

    @staticmethod
    def _build_files(bundle: ExportBundle) -> List[discord.File]:
        json_name, txt_name = CharacterCardExporter.export_filenames(bundle)
        return [
            discord.File(io.BytesIO(bundle.raw_json.encode('utf-8')), filename=json_name),
            discord.File(io.BytesIO(bundle.readable_text.encode('utf-8')), filename=txt_name),
        ]
