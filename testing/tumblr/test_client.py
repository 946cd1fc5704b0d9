"""Tests for Tumblr client module."""

import json
import unittest
from unittest.mock import MagicMock, patch

from src.tumblr.client import TumblrClient
from src.tumblr.config import TumblrConfig
from src.tumblr.exceptions import TumblrResponseError
from src.tumblr.models import Blog, Post, User

API = "https://api.tumblr.com/v2"


def _mock_response(
    status_code: int = 200,
    response: object = None,
    headers: dict | None = None,
    text: str | None = None,
) -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.headers = headers or {}
    mock_response.text = (
        text
        if text is not None
        else json.dumps({"meta": {"status": status_code, "msg": "OK"}, "response": response})
    )
    return mock_response


class TumblrClientTestCase(unittest.TestCase):
    """Base test case with a client backed by a mocked session."""

    def setUp(self) -> None:
        """Set up a client with a mocked session."""
        self.session = MagicMock()
        self.client = TumblrClient(
            "consumer-key", "consumer-secret", "token", "token-secret", session=self.session
        )

    def respond(self, *args: object, **kwargs: object) -> None:
        """Make the mocked session return a response."""
        self.session.request.return_value = _mock_response(*args, **kwargs)  # type: ignore

    @property
    def last_call(self) -> tuple[str, str, dict]:
        """Get the method, URL and parameters of the last request."""
        args, kwargs = self.session.request.call_args
        pairs = kwargs["params"] if kwargs["params"] is not None else kwargs["data"]
        return args[0], args[1], dict(pairs)


class TestTumblrClientInitialisation(unittest.TestCase):
    """Tests for TumblrClient initialisation."""

    def test_without_token_signs_unauthenticated(self) -> None:
        """Test that a client without token sends no oauth_token."""
        session = MagicMock()
        session.request.return_value = _mock_response(response={"blog": {"name": "x"}})
        client = TumblrClient("key", "secret", session=session)

        client.blog_info("x")

        header = session.request.call_args.kwargs["headers"]["Authorization"]
        self.assertNotIn("oauth_token=", header)

    def test_set_token_switches_to_authenticated(self) -> None:
        """Test that set_token is used by subsequent requests."""
        session = MagicMock()
        session.request.return_value = _mock_response(response={"user": {"name": "me"}})
        client = TumblrClient("key", "secret", session=session)

        client.set_token("access", "access-secret")
        client.user()

        header = session.request.call_args.kwargs["headers"]["Authorization"]
        self.assertIn('oauth_token="access"', header)

    def test_from_settings(self) -> None:
        """Test building a client from settings."""
        settings = TumblrConfig(
            consumer_key="key",
            consumer_secret="secret",
            api_base_url="https://example.test/v2/",
            request_timeout=5,
        )

        with patch("src.tumblr.client.Transport") as mock_transport:
            client = TumblrClient.from_settings(settings)

        self.assertEqual(client.api_key, "key")
        self.assertEqual(client.api_base_url, "https://example.test/v2")
        self.assertEqual(mock_transport.call_args.kwargs["timeout"], 5)

    def test_context_manager_closes_session(self) -> None:
        """Test that leaving the context closes the session."""
        session = MagicMock()

        with TumblrClient("key", "secret", session=session):
            pass

        session.close.assert_called_once()


class TestTumblrClientSignedCall(TumblrClientTestCase):
    """Tests for TumblrClient.signed_call method."""

    def test_returns_bound_envelope(self) -> None:
        """Test that the envelope references the client."""
        self.respond(response={"posts": [{"id": 1}]})

        envelope = self.client.signed_call("GET", "/user/dashboard")

        assert envelope is not None
        self.assertIs(envelope.client, self.client)
        self.assertIs(envelope.posts[0].client, self.client)

    def test_error_status_raises(self) -> None:
        """Test that a 404 raises with status and body."""
        body = '{"meta":{"status":404,"msg":"Not Found"}}'
        self.respond(404, text=body)

        with self.assertRaises(TumblrResponseError) as context:
            self.client.signed_call("GET", "/blog/missing.tumblr.com/info")

        self.assertEqual(context.exception.status_code, 404)
        self.assertEqual(context.exception.body, body)

    def test_malformed_body_returns_none(self) -> None:
        """Test that a malformed success body yields None."""
        self.respond(200, text="<html>")

        self.assertIsNone(self.client.signed_call("GET", "/user/info"))


class TestTumblrClientUserEndpoints(TumblrClientTestCase):
    """Tests for user endpoints."""

    def test_user(self) -> None:
        """Test that user returns the authenticated user."""
        self.respond(response={"user": {"name": "me", "blogs": [{"name": "mine"}]}})

        user = self.client.user()

        self.assertIsInstance(user, User)
        assert user is not None
        self.assertEqual(user.name, "me")
        self.assertIs(user.blogs[0].client, self.client)
        self.assertEqual(self.last_call[:2], ("GET", f"{API}/user/info"))

    def test_user_returns_none_on_malformed_body(self) -> None:
        """Test that user tolerates an undecodable body."""
        self.respond(200, text="not json")

        self.assertIsNone(self.client.user())

    def test_user_dashboard(self) -> None:
        """Test that dashboard options are sent as query parameters."""
        self.respond(response={"posts": [{"id": 1}, {"id": 2}]})

        posts = self.client.user_dashboard(limit=2, reblog_info=True)

        self.assertEqual([post.id for post in posts], [1, 2])
        self.assertEqual(
            self.last_call,
            ("GET", f"{API}/user/dashboard", {"limit": "2", "reblog_info": "true"}),
        )

    def test_user_following(self) -> None:
        """Test that following returns blogs."""
        self.respond(response={"blogs": [{"name": "a"}], "total_blogs": 1})

        blogs = self.client.user_following()

        self.assertIsInstance(blogs[0], Blog)
        self.assertEqual(self.last_call[:2], ("GET", f"{API}/user/following"))

    def test_user_likes(self) -> None:
        """Test that user likes returns liked posts."""
        self.respond(response={"liked_posts": [{"id": 5}], "liked_count": 1})

        posts = self.client.user_likes()

        self.assertEqual([post.id for post in posts], [5])
        self.assertEqual(self.last_call[:2], ("GET", f"{API}/user/likes"))

    def test_user_likes_wrong_shape_is_empty(self) -> None:
        """Test that a posts payload does not leak into the likes accessor."""
        self.respond(response={"posts": [{"id": 5}]})

        self.assertEqual(self.client.user_likes(), [])

    def test_like_and_unlike(self) -> None:
        """Test that like and unlike post the ID and reblog key."""
        self.respond(response=[])

        self.client.like(10, "rk")
        self.assertEqual(
            self.last_call, ("POST", f"{API}/user/like", {"id": "10", "reblog_key": "rk"})
        )

        self.client.unlike(10, "rk")
        self.assertEqual(
            self.last_call, ("POST", f"{API}/user/unlike", {"id": "10", "reblog_key": "rk"})
        )

    def test_follow_and_unfollow(self) -> None:
        """Test that follow and unfollow send the qualified blog URL."""
        self.respond(response=[])

        self.client.follow("example")
        self.assertEqual(
            self.last_call, ("POST", f"{API}/user/follow", {"url": "example.tumblr.com"})
        )

        self.client.unfollow("example.com")
        self.assertEqual(self.last_call, ("POST", f"{API}/user/unfollow", {"url": "example.com"}))


class TestTumblrClientBlogEndpoints(TumblrClientTestCase):
    """Tests for blog endpoints."""

    def test_blog_info_sends_api_key(self) -> None:
        """Test that blog info is fetched with the api_key."""
        self.respond(response={"blog": {"name": "example", "title": "Example", "posts": 3}})

        blog = self.client.blog_info("example")

        assert blog is not None
        self.assertEqual(blog.title, "Example")
        self.assertEqual(blog.post_count, 3)
        self.assertEqual(
            self.last_call,
            ("GET", f"{API}/blog/example.tumblr.com/info", {"api_key": "consumer-key"}),
        )

    def test_blog_followers(self) -> None:
        """Test that followers returns users."""
        self.respond(response={"users": [{"name": "fan", "following": True}], "total_users": 1})

        users = self.client.blog_followers("example.com", offset=20)

        self.assertEqual(users[0].name, "fan")
        self.assertEqual(
            self.last_call, ("GET", f"{API}/blog/example.com/followers", {"offset": "20"})
        )

    def test_blog_likes_sends_api_key(self) -> None:
        """Test that blog likes merges the api_key into the options."""
        self.respond(response={"liked_posts": [{"id": 1}]})

        self.client.blog_likes("example", limit=1)

        self.assertEqual(
            self.last_call,
            (
                "GET",
                f"{API}/blog/example.tumblr.com/likes",
                {"limit": "1", "api_key": "consumer-key"},
            ),
        )

    def test_blog_posts_moves_type_into_path(self) -> None:
        """Test that the type option becomes a path segment."""
        self.respond(response={"blog": {"name": "example"}, "posts": [{"id": 1}]})
        options = {"type": "photo", "tag": "cats"}

        posts = self.client.blog_posts("example", **options)

        self.assertIsInstance(posts[0], Post)
        self.assertEqual(
            self.last_call,
            (
                "GET",
                f"{API}/blog/example.tumblr.com/posts/photo",
                {"tag": "cats", "api_key": "consumer-key"},
            ),
        )
        self.assertEqual(options, {"type": "photo", "tag": "cats"})

    def test_blog_posts_without_type(self) -> None:
        """Test the default posts path."""
        self.respond(response={"posts": []})

        self.assertEqual(self.client.blog_posts("example"), [])
        self.assertEqual(self.last_call[1], f"{API}/blog/example.tumblr.com/posts")

    def test_queue_draft_and_submission_paths(self) -> None:
        """Test the paths of the queue, draft and submission listings."""
        self.respond(response={"posts": [{"id": 1}]})
        cases = (
            (self.client.blog_queued_posts, "/posts/queue"),
            (self.client.blog_draft_posts, "/posts/draft"),
            (self.client.blog_submissions, "/posts/submission"),
        )

        for method, suffix in cases:
            with self.subTest(suffix=suffix):
                posts = method("example")

                self.assertEqual(len(posts), 1)
                self.assertEqual(self.last_call[1], f"{API}/blog/example.tumblr.com{suffix}")


class TestTumblrClientBlogAvatar(TumblrClientTestCase):
    """Tests for TumblrClient.blog_avatar method."""

    def test_redirect_returns_location(self) -> None:
        """Test that a 301 returns its Location header."""
        self.respond(301, text="", headers={"Location": "https://host/img.png"})

        url = self.client.blog_avatar("example", 64)

        self.assertEqual(url, "https://host/img.png")
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[1], f"{API}/blog/example.tumblr.com/avatar/64")
        self.assertFalse(kwargs["allow_redirects"])

    def test_default_size_path(self) -> None:
        """Test that no size means no size segment."""
        self.respond(301, text="", headers={"location": "https://host/img.png"})

        self.client.blog_avatar("example")

        self.assertEqual(self.last_call[1], f"{API}/blog/example.tumblr.com/avatar")

    def test_ok_status_raises(self) -> None:
        """Test that a 200 is an error because no redirect was issued."""
        self.respond(200, text="image-bytes")

        with self.assertRaises(TumblrResponseError) as context:
            self.client.blog_avatar("example", 64)

        self.assertEqual(context.exception.status_code, 200)
        self.assertEqual(context.exception.body, "image-bytes")

    def test_redirect_does_not_leak(self) -> None:
        """Test that later calls follow redirects again."""
        self.respond(301, text="", headers={"Location": "https://host/img.png"})
        self.client.blog_avatar("example")

        self.respond(response={"blog": {"name": "example"}})
        self.client.blog_info("example")

        self.assertTrue(self.session.request.call_args.kwargs["allow_redirects"])


class TestTumblrClientPostEndpoints(TumblrClientTestCase):
    """Tests for post endpoints."""

    def test_post_delete(self) -> None:
        """Test that delete posts the ID to the blog."""
        self.respond(response={"id": 7})

        self.client.post_delete("example", 7)

        self.assertEqual(
            self.last_call, ("POST", f"{API}/blog/example.tumblr.com/post/delete", {"id": "7"})
        )

    def test_post_reblog(self) -> None:
        """Test that reblog returns the new post bound to the client."""
        self.respond(201, response={"id": 8})

        post = self.client.post_reblog("mine", 7, "rk", comment="wow")

        assert post is not None
        self.assertEqual(post.id, 8)
        self.assertIs(post.client, self.client)
        self.assertEqual(
            self.last_call,
            (
                "POST",
                f"{API}/blog/mine.tumblr.com/post/reblog",
                {"comment": "wow", "id": "7", "reblog_key": "rk"},
            ),
        )

    def test_reblog_from_fetched_post(self) -> None:
        """Test that a fetched post can reblog through its client."""
        self.respond(response={"posts": [{"id": 3, "reblog_key": "abc", "blog_name": "x"}]})
        post = self.client.user_dashboard()[0]

        self.respond(201, response={"id": 4})
        reblogged = post.reblog("mine")

        assert reblogged is not None
        self.assertEqual(reblogged.id, 4)
        self.assertEqual(self.last_call[2], {"id": "3", "reblog_key": "abc"})


if __name__ == "__main__":
    unittest.main()
