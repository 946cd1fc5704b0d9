"""Tumblr API client library.

This module provides classes for interacting with Tumblr's v2 API:
- TumblrClient: OAuth 1.0a signed client for blog, post and user endpoints
- Post, Blog, User: Decoded entities that can issue follow-up calls
- ResponseEnvelope: Typed view over a success response
"""

from src.tumblr.client import TumblrClient
from src.tumblr.config import TumblrConfig, get_tumblr_settings
from src.tumblr.exceptions import TumblrClientError, TumblrResponseError
from src.tumblr.models import Blog, Post, ResponseEnvelope, User
from src.tumblr.paths import blog_path, blog_url

__all__ = [
    "Blog",
    "Post",
    "ResponseEnvelope",
    "TumblrClient",
    "TumblrClientError",
    "TumblrConfig",
    "TumblrResponseError",
    "User",
    "blog_path",
    "blog_url",
    "get_tumblr_settings",
]
