import base64
import datetime
import unittest
from unittest.mock import patch

from blog_editor.errors import NotFoundError, RemoteRepositoryError
from blog_editor.settings import settings
from blog_editor.utils.utils import split_front_matter

from ..tests.utils_helpers import SAMPLE_POST, build_client, github_dir_entry, github_file


@patch.multiple(settings, GITHUB_OWNER="octo", GITHUB_REPO="blog", EDITOR_ENV="development")
class TestArticlesApi(unittest.TestCase):

    ENDPOINT_ARTICLES = "/api/articles"

    def setUp(self) -> None:
        self.app, self.client = build_client()
        patcher = patch("blog_editor.api.articles.RepositoryClient")
        self.client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.repo = self.client_cls.from_settings.return_value

    def tearDown(self) -> None:
        self.client.close()

    def test_get_article_splits_front_matter(self):
        self.repo.get_content.return_value = github_file(SAMPLE_POST, sha="abc")

        response = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"title": "Hi", "author": "", "tags": [], "content": "Body", "sha": "abc"})
        self.repo.get_content.assert_called_once_with("_posts/post.md")
        self.repo.close.assert_called_once()

    def test_get_article_keeps_body_verbatim(self):
        post = "---\ntitle: Code\n---\n    indented code\n\nBody\n"
        self.repo.get_content.return_value = github_file(post, sha="abc")

        response = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["content"], "    indented code\n\nBody\n")

    def test_get_article_normalises_tags(self):
        cases = {
            "tags: [python, web]": ["python", "web"],
            "tags: python web": ["python", "web"],
            "tags: python, web": ["python", "web"],
            "tags: 2024": ["2024"],
            "tags:": [],
        }
        for tags_line, expected in cases.items():
            with self.subTest(tags_line=tags_line):
                post = f"---\ntitle: T\nauthor: Ada\n{tags_line}\n---\nBody"
                self.repo.get_content.return_value = github_file(post)

                data = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md").json()

                self.assertEqual(data["tags"], expected)
                self.assertEqual(data["author"], "Ada")

    def test_get_article_with_japanese_filename(self):
        self.repo.get_content.return_value = github_file(SAMPLE_POST, path="_posts/日本語-記事.md")

        response = self.client.get(f"{self.ENDPOINT_ARTICLES}/日本語-記事.md")

        self.assertEqual(response.status_code, 200)
        self.repo.get_content.assert_called_once_with("_posts/日本語-記事.md")

    def test_invalid_filenames_rejected_before_remote_call(self):
        for filename in ("..%2F..%2Fetc%2Fpasswd.md", "..%252F..%252Fetc%252Fpasswd.md",
                         "bad%5Cname.md", "notes.txt", "post.md.bak", "post%20space.md"):
            with self.subTest(filename=filename):
                response = self.client.get(f"{self.ENDPOINT_ARTICLES}/{filename}")
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Invalid filename"})

                response = self.client.request("DELETE", f"{self.ENDPOINT_ARTICLES}/{filename}", json={"sha": "abc"})
                self.assertEqual(response.status_code, 400)

        self.client_cls.from_settings.assert_not_called()

    def test_directory_is_not_found(self):
        self.repo.get_content.return_value = [github_dir_entry("a.md")]

        response = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "File not found or is a directory"})

    def test_missing_remote_file_is_not_found(self):
        self.repo.get_content.side_effect = NotFoundError("File not found or is a directory")

        response = self.client.get(f"{self.ENDPOINT_ARTICLES}/missing.md")

        self.assertEqual(response.status_code, 404)

    def test_remote_failure_reports_message_outside_production(self):
        self.repo.get_content.side_effect = RemoteRepositoryError("Bad credentials", 401)

        with self.assertLogs("editor.articles", level="ERROR"):
            response = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Bad credentials"})

    def test_remote_failure_redacted_in_production(self):
        self.repo.get_content.side_effect = RuntimeError("token ghp_secret rejected")

        with patch.object(settings, "EDITOR_ENV", "production"), self.assertLogs("editor.articles", level="ERROR"):
            response = self.client.get(f"{self.ENDPOINT_ARTICLES}/post.md")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "An internal error occurred"})

    def test_delete_article_attributes_commit_to_user(self):
        response = self.client.request("DELETE", f"{self.ENDPOINT_ARTICLES}/post.md", json={"sha": "abc"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        self.repo.delete_content.assert_called_once_with(
            "_posts/post.md",
            message="Delete article post.md by ada@example.com",
            sha="abc",
            committer={"name": "Ada Lovelace", "email": "ada@example.com"},
        )

    def test_delete_requires_sha(self):
        for kwargs in ({}, {"json": {}}, {"json": {"sha": ""}}):
            with self.subTest(kwargs=kwargs):
                response = self.client.request("DELETE", f"{self.ENDPOINT_ARTICLES}/post.md", **kwargs)
                self.assertEqual(response.status_code, 400)

        self.repo.delete_content.assert_not_called()

    def test_delete_rejects_malformed_body(self):
        response = self.client.request("DELETE", f"{self.ENDPOINT_ARTICLES}/post.md", content=b"{not json",
                                       headers={"Content-Type": "application/json"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid JSON body"})

    def test_delete_remote_failure_is_internal_error(self):
        self.repo.delete_content.side_effect = RemoteRepositoryError("sha does not match", 409)

        with self.assertLogs("editor.articles", level="ERROR"):
            response = self.client.request("DELETE", f"{self.ENDPOINT_ARTICLES}/post.md", json={"sha": "old"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "sha does not match"})

    def test_list_articles_keeps_markdown_files(self):
        self.repo.list_directory.return_value = [
            github_dir_entry("2024-01-01-hello.md", sha="s1"),
            github_dir_entry("drafts", entry_type="dir"),
            github_dir_entry("README.txt"),
        ]

        response = self.client.get(self.ENDPOINT_ARTICLES)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [
            {"filename": "2024-01-01-hello.md", "path": "_posts/2024-01-01-hello.md", "sha": "s1", "size": 42},
        ])
        self.repo.list_directory.assert_called_once_with("_posts")

    def test_put_article_updates_with_sha(self):
        self.repo.put_content.return_value = {"content": {"sha": "new-sha"}}

        response = self.client.put(f"{self.ENDPOINT_ARTICLES}/post.md", json={
            "title": "Hi", "author": "Ada", "tags": "python, web", "content": "Body", "sha": "old-sha"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "sha": "new-sha"})

        kwargs = self.repo.put_content.call_args.kwargs
        self.assertEqual(self.repo.put_content.call_args.args, ("_posts/post.md",))
        self.assertEqual(kwargs["message"], "Update article post.md by ada@example.com")
        self.assertEqual(kwargs["sha"], "old-sha")

        metadata, body = split_front_matter(base64.b64decode(kwargs["content"]).decode("utf-8"))
        self.assertEqual(metadata, {"title": "Hi", "author": "Ada", "tags": ["python", "web"]})
        self.assertEqual(body, "Body\n")

    def test_put_article_keeps_other_front_matter_keys(self):
        stored = "---\nlayout: post\ntitle: Old\ndate: 2024-01-05\ncategories: [notes]\ntags: [old]\n---\nOld body\n"
        self.repo.get_content.return_value = github_file(stored, sha="old-sha")
        self.repo.put_content.return_value = {"content": {"sha": "new-sha"}}

        response = self.client.put(f"{self.ENDPOINT_ARTICLES}/post.md", json={
            "title": "New", "author": "Ada", "tags": ["web"], "content": "New body", "sha": "old-sha"})

        self.assertEqual(response.status_code, 200)
        self.repo.get_content.assert_called_once_with("_posts/post.md")

        metadata, body = split_front_matter(
            base64.b64decode(self.repo.put_content.call_args.kwargs["content"]).decode("utf-8"))
        self.assertEqual(metadata, {"layout": "post", "date": datetime.date(2024, 1, 5), "categories": ["notes"],
                                    "title": "New", "author": "Ada", "tags": ["web"]})
        self.assertEqual(body, "New body\n")

    def test_put_article_without_sha_creates(self):
        self.repo.put_content.return_value = {"content": {"sha": "first"}}

        response = self.client.put(f"{self.ENDPOINT_ARTICLES}/new-post.md", json={"title": "New", "content": "x"})

        self.assertEqual(response.status_code, 200)
        kwargs = self.repo.put_content.call_args.kwargs
        self.assertEqual(kwargs["message"], "Create article new-post.md by ada@example.com")
        self.assertIsNone(kwargs["sha"])
        self.repo.get_content.assert_not_called()


class TestArticlesConfiguration(unittest.TestCase):

    def setUp(self) -> None:
        self.app, self.client = build_client()

    def tearDown(self) -> None:
        self.client.close()

    @patch.multiple(settings, GITHUB_OWNER=None, GITHUB_REPO="blog")
    def test_missing_owner_is_configuration_error(self):
        response = self.client.get("/api/articles/post.md")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Config missing"})

    @patch.multiple(settings, GITHUB_OWNER="octo", GITHUB_REPO=None)
    def test_invalid_filename_checked_before_configuration(self):
        response = self.client.get("/api/articles/notes.txt")

        self.assertEqual(response.status_code, 400)


class TestArticlesUnauthenticated(unittest.TestCase):

    def setUp(self) -> None:
        self.app, self.client = build_client(user=None)

    def tearDown(self) -> None:
        self.client.close()

    @patch("blog_editor.api.articles.RepositoryClient")
    def test_every_route_requires_session(self, client_cls):
        requests = [
            ("GET", "/api/articles", {}),
            ("GET", "/api/articles/post.md", {}),
            ("GET", "/api/articles/..%2F..%2Fetc%2Fpasswd.md", {}),
            ("PUT", "/api/articles/post.md", {"json": {"title": "x"}}),
            ("DELETE", "/api/articles/post.md", {"json": {"sha": "abc"}}),
            ("DELETE", "/api/articles/post.md", {"content": b"{broken"}),
        ]
        for method, url, kwargs in requests:
            with self.subTest(method=method, url=url):
                response = self.client.request(method, url, **kwargs)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json(), {"error": "Unauthorized"})

        client_cls.from_settings.assert_not_called()
