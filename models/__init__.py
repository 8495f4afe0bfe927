import logging
from .gemini_client import get_gemini, get_gemini_response

__all__ = ["get_gemini", "get_gemini_response"]

"""
Models package initialization.
This file exposes the lazily built Gemini chat model for easy access.
"""


logging.getLogger(__name__).addHandler(logging.NullHandler())
