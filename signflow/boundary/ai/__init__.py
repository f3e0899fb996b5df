"""
AI boundary modules.

Exports: AITextClient
"""

from .ai_text_client import AITextClient

__all__ = ["AITextClient"]
