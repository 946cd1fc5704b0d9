"""Custom exceptions for the Tumblr API client."""


class TumblrClientError(Exception):
    """Raised when a Tumblr API call cannot be completed.

    This covers transport failures (connection errors, timeouts) and entities
    whose originating client is no longer available.
    """

    pass


class TumblrResponseError(TumblrClientError):
    """Raised when the Tumblr API answers with a non-success status.

    No structure is parsed out of the body; callers inspect ``status_code``
    and ``body`` directly.
    """

    def __init__(self, status_code: int, body: str) -> None:
        """Initialise the error.

        :param status_code: HTTP status code returned by the API.
        :param body: Raw response body, preserved verbatim.
        """
        super().__init__(f"Tumblr API request failed: {status_code} - {body}")
        self.status_code = status_code
        self.body = body
