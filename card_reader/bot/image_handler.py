"""
Image Handler for the card reader bot

Finds the card image attached to a command message (or to the message it
replies to) and downloads it.
"""
import logging
import asyncio
import aiohttp
from typing import Optional
import discord

logger = logging.getLogger(__name__)


class ImageDownloadError(Exception):
    """Raised when the card image cannot be downloaded."""
    pass


class ImageHandler:
    """Locates and downloads card images from Discord messages."""
    
    # Supported image MIME types
    SUPPORTED_TYPES = [
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/webp",
        "image/gif"
    ]
    
    def __init__(self, max_file_size_mb: int = 20, timeout: int = 30):
        """Initialize image handler.
        
        Args:
            max_file_size_mb: Maximum image size in MB
            timeout: Download timeout in seconds
        """
        self.max_file_size = max_file_size_mb * 1024 * 1024  # Convert to bytes
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None
    
    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session
    
    async def find_image_url(self, message: discord.Message) -> Optional[str]:
        """Find the card image URL for a command message.
        
        Checks the message's own attachments first, then the attachments of
        the message it replies to.
        
        Args:
            message: Discord message carrying the command
            
        Returns:
            Image URL, or None if neither message has an image
        """
        url = self._first_image_url(message)
        if url:
            return url
        
        reference = message.reference
        if reference is None or reference.message_id is None:
            return None
        
        referenced = reference.resolved
        if getattr(referenced, 'attachments', None) is None:
            try:
                referenced = await message.channel.fetch_message(reference.message_id)
            except discord.HTTPException as e:
                logger.warning(f"Failed to fetch referenced message {reference.message_id}: {e}")
                return None
        
        return self._first_image_url(referenced)
    
    def _first_image_url(self, message) -> Optional[str]:
        for attachment in message.attachments:
            if self._is_image(attachment):
                return attachment.url
            logger.debug(f"Skipping non-image attachment: {attachment.filename}")
        return None
    
    async def download(self, url: str) -> bytes:
        """Download an image, enforcing the size limit.
        
        Raises:
            ImageDownloadError: On network errors, bad status or oversized images
        """
        logger.debug(f"Downloading card image from {url}")
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise ImageDownloadError(f"HTTP {response.status}")
                
                if response.content_length and response.content_length > self.max_file_size:
                    raise ImageDownloadError(
                        f"image too large ({response.content_length} bytes, max {self.max_file_size})"
                    )
                
                data = bytearray()
                async for chunk in response.content.iter_chunked(64 * 1024):
                    data.extend(chunk)
                    if len(data) > self.max_file_size:
                        raise ImageDownloadError(f"image larger than {self.max_file_size} bytes")
                
        except aiohttp.ClientError as e:
            raise ImageDownloadError(f"network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise ImageDownloadError("download timed out") from e
        
        logger.debug(f"Downloaded {len(data)} bytes")
        return bytes(data)
    
    def _is_image(self, attachment: discord.Attachment) -> bool:
        """Check if attachment is a supported image type.
        
        Args:
            attachment: Discord attachment
            
        Returns:
            True if supported image type
        """
        # Check content type if available
        if attachment.content_type:
            if attachment.content_type.lower().split(';')[0] in self.SUPPORTED_TYPES:
                return True
        
        # Fallback: check file extension
        filename_lower = attachment.filename.lower()
        image_extensions = ['.png', '.jpg', '.jpeg', '.webp', '.gif']
        
        return any(filename_lower.endswith(ext) for ext in image_extensions)
    
    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
