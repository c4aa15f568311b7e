"""
Card Read Errors
================

Typed failures of the card reading pipeline. Each error records the pipeline
stage it terminated, so callers can report a single message per image.
"""

from enum import Enum


class PipelineStage(str, Enum):
    """States of the per-image reading pipeline."""
    SCANNING = "scanning"
    LOCATED = "located"
    DECODED = "decoded"
    RENDERED = "rendered"
    ASSEMBLED = "assembled"
    FAILED = "failed"


class CardReadError(Exception):
    """Base exception for character card reading errors."""

    stage: PipelineStage = PipelineStage.FAILED


class FormatError(CardReadError):
    """The buffer is not a well-formed PNG container."""

    stage = PipelineStage.SCANNING


class NotFoundError(CardReadError):
    """Well-formed PNG without a ccv3/chara text chunk."""

    stage = PipelineStage.LOCATED


class DecodeError(CardReadError):
    """The located payload is not valid Base64 JSON card data."""

    stage = PipelineStage.DECODED
