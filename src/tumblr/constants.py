"""Shared constants for the Tumblr API client."""

# API origin, every resource path is appended to this
API_BASE_URL = "https://api.tumblr.com/v2"

# Appended to bare blog names that carry no domain
DEFAULT_BLOG_HOST_SUFFIX = ".tumblr.com"

# Statuses the resolver treats as success
SUCCESS_STATUS_CODES = frozenset({200, 201})

# The avatar endpoint answers with a redirect to the image
AVATAR_REDIRECT_STATUS = 301

# OAuth 1.0a protocol values
OAUTH_SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

DEFAULT_USER_AGENT = "tumblr-client/0.1.0"
