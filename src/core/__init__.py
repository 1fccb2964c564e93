"""
Core utilities shared across the application.
"""

from .aws import create_clients
from .logger import setup_logging

__all__ = ["create_clients", "setup_logging"]
