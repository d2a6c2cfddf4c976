"""Arbiter -- scoring engine for AI answers and tool-calling transcripts."""

from loguru import logger

__version__ = "0.1.0"

# Silent until an application calls logger.enable("arbiter").
logger.disable("arbiter")
