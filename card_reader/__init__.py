"""
Card Reader - SillyTavern Character Card Extraction

Reads character card metadata embedded in PNG images and exports it as JSON
and readable text, from the command line or through a Discord bot.
"""

__version__ = "0.1.0"
