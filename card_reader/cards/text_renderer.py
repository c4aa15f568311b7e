"""
Readable Text Renderer
=====================

Renders a character card as a plain-text document with a fixed field order,
and parses such a document back into its labeled sections.

Layout::

    Name: Aria
    Created By: someone
    Tags: a, b

    ----------------------------------------
    [Description]
    A knight.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from .models import CharacterCard, DocumentSection, RenderedDocument

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 40


def _spec_info(card: CharacterCard) -> Optional[str]:
    spec, version = card.spec, card.spec_version
    if spec and version:
        return f"{spec} ({version})"
    return spec or version


def _tag_line(card: CharacterCard) -> Optional[str]:
    if not card.data.tags:
        return None
    return ", ".join(card.data.tags)


# (label, value getter); short fields render on one line
INLINE_FIELDS: List[Tuple[str, Callable[[CharacterCard], Optional[str]]]] = [
    ("Name", lambda c: c.data.name),
    ("Spec", _spec_info),
    ("Version", lambda c: c.data.character_version),
    ("Created By", lambda c: c.data.creator),
    ("Tags", _tag_line),
]

BLOCK_FIELDS: List[Tuple[str, Callable[[CharacterCard], Optional[str]]]] = [
    ("Description", lambda c: c.data.description),
    ("First Message", lambda c: c.data.first_message),
    ("Personality", lambda c: c.data.personality),
    ("Scenario", lambda c: c.data.scenario),
    ("System Prompt", lambda c: c.data.system_prompt),
    ("Creator Notes", lambda c: c.data.creator_notes),
]

FIELD_LABELS = [label for label, _ in INLINE_FIELDS + BLOCK_FIELDS]

_BLOCK_START = re.compile(
    r'(?:^|\n)\n' + re.escape(SEPARATOR)
    + r'\n\[(' + '|'.join(re.escape(label) for label, _ in BLOCK_FIELDS) + r')\]\n'
)
_INLINE_LINE = re.compile(
    r'^(' + '|'.join(re.escape(label) for label, _ in INLINE_FIELDS) + r'): (.*)$'
)


def render_section(section: DocumentSection) -> str:
    """Render one section, including its trailing newline."""
    if section.inline:
        return f"{section.label}: {section.value}\n"
    return f"\n{SEPARATOR}\n[{section.label}]\n{section.value}\n"


def render_card(card: CharacterCard) -> RenderedDocument:
    """
    Render the present fields of a card in the fixed readable order.

    Absent or empty fields produce no section at all.
    """
    sections: List[DocumentSection] = []

    for label, getter in INLINE_FIELDS:
        value = getter(card)
        if value:
            sections.append(DocumentSection(label=label, value=value, inline=True))

    for label, getter in BLOCK_FIELDS:
        value = getter(card)
        if value:
            sections.append(DocumentSection(label=label, value=value))

    text = "".join(render_section(section) for section in sections)
    logger.debug(f"Rendered {len(sections)} section(s), {len(text)} chars")
    return RenderedDocument(sections=tuple(sections), text=text)


def parse_document(text: str) -> List[DocumentSection]:
    """
    Split a rendered document back into its labeled sections, in order.

    Inline values that span several lines are rejoined with newlines.

    The layout has no escaping: a block value that itself contains a blank
    line, the separator and a known ``[Label]`` line is split into two
    sections. Values read straight from a card rarely do, but callers that
    need exact values should use the card rather than its text.
    """
    parts = _BLOCK_START.split(text)
    header, blocks = parts[0], parts[1:]

    # the first block match consumes the header's final newline
    if not blocks and header.endswith("\n"):
        header = header[:-1]

    sections: List[DocumentSection] = []
    for line in header.split("\n") if header else []:
        match = _INLINE_LINE.match(line)
        if match:
            sections.append(DocumentSection(label=match.group(1), value=match.group(2), inline=True))
        elif sections:
            last = sections[-1]
            sections[-1] = DocumentSection(label=last.label, value=f"{last.value}\n{line}", inline=True)

    for i in range(0, len(blocks), 2):
        label, body = blocks[i], blocks[i + 1]
        if i + 2 >= len(blocks) and body.endswith("\n"):
            body = body[:-1]
        sections.append(DocumentSection(label=label, value=body))

    return sections
