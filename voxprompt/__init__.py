"""Voice transcription and prompt enhancement service."""

__version__ = "0.1.0"
