"""
Kontent.ai Management API client
"""

from .kontent_client import KontentClient

__all__ = ['KontentClient']
