"""Database models for the FAQ backend."""

from .faq import FAQ

__all__ = ['FAQ']
