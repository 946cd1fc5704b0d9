"""Tumblr API client for blogs, posts and the authenticated user."""

from __future__ import annotations

import logging
from typing import Any

import requests

from src.tumblr.config import TumblrConfig, get_tumblr_settings
from src.tumblr.constants import API_BASE_URL, AVATAR_REDIRECT_STATUS
from src.tumblr.credentials import Credentials
from src.tumblr.exceptions import TumblrResponseError
from src.tumblr.models import Blog, Post, ResponseEnvelope, User
from src.tumblr.paths import blog_path, blog_url
from src.tumblr.resolver import resolve
from src.tumblr.signing import HttpMethod, RequestSigner
from src.tumblr.transport import RawResponse, Transport

logger = logging.getLogger(__name__)


class TumblrClient:
    """Client for the Tumblr v2 API.

    Every request is signed with OAuth 1.0a. Without an access token the
    client signs with the consumer pair only, which is enough for public
    reads; user-specific calls need a token.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: str | None = None,
        token_secret: str | None = None,
        *,
        api_base_url: str = API_BASE_URL,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialise the Tumblr client.

        :param consumer_key: OAuth consumer key.
        :param consumer_secret: OAuth consumer secret.
        :param token: Optional OAuth access token.
        :param token_secret: Optional OAuth access token secret.
        :param api_base_url: API origin requests are sent to.
        :param timeout: Request timeout in seconds, None for no timeout.
        :param session: Optional requests session to send requests with.
        """
        self._credentials = Credentials(consumer_key, consumer_secret, token, token_secret)
        self._signer = RequestSigner(self._credentials)
        self._transport = Transport(session=session, timeout=timeout)
        self.api_base_url = api_base_url.rstrip("/")

        logger.debug(f"TumblrClient initialised: authenticated={self._credentials.has_token}")

    @classmethod
    def from_settings(cls, settings: TumblrConfig | None = None) -> TumblrClient:
        """Create a client from settings.

        :param settings: Tumblr settings. If not provided, loads from env.
        :returns: The configured client.
        """
        settings = settings or get_tumblr_settings()
        return cls(
            settings.consumer_key,
            settings.consumer_secret,
            settings.token,
            settings.token_secret,
            api_base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )

    def set_token(self, token: str, token_secret: str) -> None:
        """Set the access token used to sign subsequent requests.

        :param token: OAuth access token.
        :param token_secret: OAuth access token secret.
        """
        self._credentials.set_token(token, token_secret)

    @property
    def api_key(self) -> str:
        """Get the consumer key, sent as ``api_key`` by public endpoints."""
        return self._credentials.consumer_key

    # Request pipeline

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        allow_redirects: bool = True,
    ) -> RawResponse:
        """Sign and send a request without interpreting the response.

        :param method: HTTP verb, GET or POST.
        :param path: API path, appended to the API origin.
        :param params: Query (GET) or body (POST) parameters.
        :param allow_redirects: Whether to follow redirects for this call.
        :returns: The raw response.
        :raises TumblrClientError: If the request could not be completed.
        """
        signed = self._signer.sign(method, f"{self.api_base_url}{path}", params)
        return self._transport.send(signed, allow_redirects=allow_redirects)

    def signed_call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> ResponseEnvelope | None:
        """Sign, send and resolve a request.

        :param method: HTTP verb, GET or POST.
        :param path: API path, appended to the API origin.
        :param params: Query (GET) or body (POST) parameters.
        :returns: The envelope, or None if a success body could not be decoded.
        :raises TumblrResponseError: If the API returns an error status.
        :raises TumblrClientError: If the request could not be completed.
        """
        raw = self.request(method, path, params)
        return resolve(raw, self)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> ResponseEnvelope | None:
        return self.signed_call(HttpMethod.GET, path, params)

    def _post(self, path: str, params: dict[str, Any] | None = None) -> ResponseEnvelope | None:
        return self.signed_call(HttpMethod.POST, path, params)

    def _with_api_key(self, options: dict[str, Any]) -> dict[str, Any]:
        return {**options, "api_key": self.api_key}

    # User endpoints

    def user(self) -> User | None:
        """Get the authenticated user.

        :returns: The user, including their blogs.
        """
        logger.info("Retrieving authenticated user info")
        envelope = self._get("/user/info")
        return envelope.user if envelope else None

    def user_dashboard(self, **options: Any) -> list[Post]:
        """Get the authenticated user's dashboard.

        :param options: Query options, e.g. ``limit``, ``offset``, ``type``.
        :returns: Dashboard posts.
        """
        logger.info("Retrieving user dashboard")
        envelope = self._get("/user/dashboard", options)
        return envelope.posts if envelope else []

    def user_following(self, **options: Any) -> list[Blog]:
        """Get the blogs the authenticated user follows.

        :param options: Query options, e.g. ``limit``, ``offset``.
        :returns: Followed blogs.
        """
        logger.info("Retrieving followed blogs")
        envelope = self._get("/user/following", options)
        return envelope.blogs if envelope else []

    def user_likes(self, **options: Any) -> list[Post]:
        """Get the posts the authenticated user likes.

        :param options: Query options, e.g. ``limit``, ``offset``.
        :returns: Liked posts.
        """
        logger.info("Retrieving user likes")
        envelope = self._get("/user/likes", options)
        return envelope.liked_posts if envelope else []

    def like(self, post_id: int | None, reblog_key: str | None) -> None:
        """Like a post.

        :param post_id: ID of the post to like.
        :param reblog_key: Reblog key of the post.
        """
        logger.info(f"Liking post: post_id={post_id}")
        self._post("/user/like", {"id": post_id, "reblog_key": reblog_key})

    def unlike(self, post_id: int | None, reblog_key: str | None) -> None:
        """Unlike a post.

        :param post_id: ID of the post to unlike.
        :param reblog_key: Reblog key of the post.
        """
        logger.info(f"Unliking post: post_id={post_id}")
        self._post("/user/unlike", {"id": post_id, "reblog_key": reblog_key})

    def follow(self, blog_name: str) -> None:
        """Follow a blog.

        :param blog_name: Name or host name of the blog.
        """
        logger.info(f"Following blog: {blog_name}")
        self._post("/user/follow", {"url": blog_url(blog_name)})

    def unfollow(self, blog_name: str) -> None:
        """Unfollow a blog.

        :param blog_name: Name or host name of the blog.
        """
        logger.info(f"Unfollowing blog: {blog_name}")
        self._post("/user/unfollow", {"url": blog_url(blog_name)})

    # Blog endpoints

    def blog_info(self, blog_name: str) -> Blog | None:
        """Get information about a blog.

        :param blog_name: Name or host name of the blog.
        :returns: The blog.
        """
        logger.info(f"Retrieving blog info: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/info"), self._with_api_key({}))
        return envelope.blog if envelope else None

    def blog_followers(self, blog_name: str, **options: Any) -> list[User]:
        """Get the followers of a blog.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``limit``, ``offset``.
        :returns: Followers.
        """
        logger.info(f"Retrieving blog followers: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/followers"), options)
        return envelope.users if envelope else []

    def blog_likes(self, blog_name: str, **options: Any) -> list[Post]:
        """Get the public likes of a blog.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``limit``, ``offset``.
        :returns: Liked posts.
        """
        logger.info(f"Retrieving blog likes: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/likes"), self._with_api_key(options))
        return envelope.liked_posts if envelope else []

    def blog_posts(self, blog_name: str, **options: Any) -> list[Post]:
        """Get the published posts of a blog.

        A ``type`` option narrows the posts to one type and is sent as part of
        the path rather than as a parameter.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``type``, ``tag``, ``limit``.
        :returns: Posts.
        """
        params = self._with_api_key(options)
        path = "/posts"
        post_type = params.pop("type", None)
        if post_type is not None:
            path = f"{path}/{post_type}"

        logger.info(f"Retrieving blog posts: {blog_name} path={path}")
        envelope = self._get(blog_path(blog_name, path), params)
        return envelope.posts if envelope else []

    def blog_queued_posts(self, blog_name: str, **options: Any) -> list[Post]:
        """Get the queued posts of a blog.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``limit``, ``offset``.
        :returns: Queued posts.
        """
        logger.info(f"Retrieving queued posts: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/posts/queue"), options)
        return envelope.posts if envelope else []

    def blog_draft_posts(self, blog_name: str, **options: Any) -> list[Post]:
        """Get the draft posts of a blog.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``before_id``.
        :returns: Draft posts.
        """
        logger.info(f"Retrieving draft posts: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/posts/draft"), options)
        return envelope.posts if envelope else []

    def blog_submissions(self, blog_name: str, **options: Any) -> list[Post]:
        """Get the submissions to a blog.

        :param blog_name: Name or host name of the blog.
        :param options: Query options, e.g. ``offset``.
        :returns: Submitted posts.
        """
        logger.info(f"Retrieving submissions: {blog_name}")
        envelope = self._get(blog_path(blog_name, "/posts/submission"), options)
        return envelope.posts if envelope else []

    def blog_avatar(self, blog_name: str, size: int | None = None) -> str:
        """Get the URL of a blog's avatar.

        The API answers with a 301 whose ``Location`` is the image, so this
        call is sent without following redirects.

        :param blog_name: Name or host name of the blog.
        :param size: Optional avatar size in pixels.
        :returns: The avatar image URL.
        :raises TumblrResponseError: If the API does not answer with a 301.
        """
        suffix = "/avatar" if size is None else f"/avatar/{size}"
        logger.info(f"Retrieving blog avatar: {blog_name} size={size}")

        raw = self.request(HttpMethod.GET, blog_path(blog_name, suffix), allow_redirects=False)
        location = raw.header("Location")
        if raw.status_code != AVATAR_REDIRECT_STATUS or location is None:
            logger.warning(f"Avatar lookup did not redirect: status={raw.status_code}")
            raise TumblrResponseError(raw.status_code, raw.body)

        return location

    # Post endpoints

    def post_delete(self, blog_name: str | None, post_id: int | None) -> None:
        """Delete a post.

        :param blog_name: Name or host name of the blog the post is on.
        :param post_id: ID of the post to delete.
        """
        logger.info(f"Deleting post: blog={blog_name} post_id={post_id}")
        self._post(blog_path(blog_name, "/post/delete"), {"id": post_id})

    def post_reblog(
        self,
        blog_name: str,
        post_id: int | None,
        reblog_key: str | None,
        **options: Any,
    ) -> Post | None:
        """Reblog a post onto a blog.

        :param blog_name: Name or host name of the blog to reblog onto.
        :param post_id: ID of the post to reblog.
        :param reblog_key: Reblog key of the post.
        :param options: Additional options, e.g. ``comment``, ``tags``.
        :returns: The created post, usually carrying only its ID.
        """
        logger.info(f"Reblogging post: blog={blog_name} post_id={post_id}")
        params = {**options, "id": post_id, "reblog_key": reblog_key}
        envelope = self._post(blog_path(blog_name, "/post/reblog"), params)
        return envelope.post if envelope else None

    def close(self) -> None:
        """Close the HTTP session."""
        self._transport.close()

    def __enter__(self) -> TumblrClient:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager."""
        self.close()
