"""Trigger command matching for chat messages."""

from typing import Sequence


def parse_command(text: str, prefixes: Sequence[str], commands: Sequence[str]) -> bool:
    """
    Check whether a message text triggers the card reader.

    With prefixes configured, the text must start with one of them (longest
    prefix first) and the remainder must equal a command. Without prefixes the
    whole text must equal a command. Surrounding whitespace is ignored.

    Args:
        text: Message text
        prefixes: Allowed command prefixes, may be empty
        commands: Trigger commands

    Returns:
        True if the message is a card reader command
    """
    text = text.strip()

    if prefixes:
        for prefix in sorted(prefixes, key=len, reverse=True):
            if text.startswith(prefix):
                text = text[len(prefix):].strip()
                break
        else:
            return False

    return text in commands
