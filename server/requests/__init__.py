"""
HTTP request models for the API.

These are Pydantic models for validating and parsing API requests.
"""

from .post_message_request import PostMessageRequest
from .register_request import RegisterRequest

__all__ = [
    "RegisterRequest",
    "PostMessageRequest",
]
