"""Discord front end for the card reader."""

from .bot import CardReaderBot
from .card_handler import CardRequestHandler
from .commands import parse_command
from .image_handler import ImageDownloadError, ImageHandler

__all__ = [
    'CardReaderBot',
    'CardRequestHandler',
    'parse_command',
    'ImageDownloadError',
    'ImageHandler',
]
