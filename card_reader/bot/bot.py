"""Discord bot that reads character cards from posted images."""

import discord
import logging
from typing import Optional
from discord.ext import commands

from ..config import ConfigLoader, ConfigLoadError, SystemConfig
from .card_handler import CardRequestHandler
from .commands import parse_command
from .image_handler import ImageHandler

logger = logging.getLogger(__name__)


class CardReaderBot(commands.Bot):
    """Discord bot answering card reader commands with JSON and text exports."""

    def __init__(self, config: SystemConfig, config_loader: Optional[ConfigLoader] = None):
        """
        Initialize the Discord bot.

        Args:
            config: Loaded configuration
            config_loader: Loader used to save the configuration on shutdown
        """
        self.config = config
        self.config_loader = config_loader

        # Setup Discord intents
        intents = discord.Intents.default()
        intents.message_content = True  # Required to read message content
        intents.messages = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None  # Disable default help command
        )

        self.image_handler = ImageHandler(
            max_file_size_mb=config.bot.max_image_size_mb,
            timeout=config.bot.download_timeout_seconds
        )
        self.card_handler = CardRequestHandler(config, self.image_handler)

        logger.info(
            f"CardReaderBot initialized (commands={config.reader.commands}, "
            f"prefixes={config.reader.prefixes})"
        )

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord."""
        logger.info(f"Bot connected as {self.user.name} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} server(s)")

    async def on_message(self, message: discord.Message):
        """
        Handle incoming Discord messages.

        Args:
            message: Discord message object
        """
        # Ignore messages from the bot itself and other bots
        if message.author == self.user or message.author.bot:
            return

        reader = self.config.reader
        if not reader.enabled or not message.content:
            return

        if not parse_command(message.content, reader.prefixes, reader.commands):
            return

        logger.info(
            f"Card command from {message.author.name} "
            f"in {'DM' if isinstance(message.channel, discord.DMChannel) else f'#{message.channel}'}"
        )

        try:
            await self.card_handler.handle(message)
        except Exception as e:
            logger.exception(f"Unexpected error handling card command: {e}")
            await message.reply("❌ An unexpected error occurred while reading the card.")

    async def on_error(self, event_method: str, *args, **kwargs):
        """Handle errors in event handlers."""
        logger.exception(f"Error in {event_method}")

    async def close(self):
        """Clean shutdown."""
        logger.info("Closing bot...")
        await self.image_handler.close()
        if self.config_loader is not None:
            try:
                self.config_loader.save(self.config)
            except ConfigLoadError as e:
                logger.error(f"Failed to save config: {e}")
        await super().close()
