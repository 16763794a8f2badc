"""Tests for webhook-driven and local-Git imports.

- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during ``fetch_file_contents`` tests.
- ``subprocess.run`` is replaced by a recorder so no real ``git`` is invoked.
"""

from __future__ import annotations

import sqlite3
import subprocess
from pathlib import Path
from typing import Generator

import httpx
import pytest
import respx

from vaultwiki.db.articles import get_article, list_article_paths
from vaultwiki.db.connection import get_connection
from vaultwiki.db.migrations import init_db
from vaultwiki.db.relations import list_relations
from vaultwiki.exceptions import VaultImportError, VaultNotFoundError
from vaultwiki.vault.git import import_from_local_git, sync_repository
from vaultwiki.vault.webhook import (
    branch_of,
    extract_modified_files,
    fetch_file_contents,
    import_from_webhook,
    repository_of,
)

BASE_URL = "https://raw.example.com"

PAYLOAD = {
    "ref": "refs/heads/main",
    "repository": {"name": "vault", "owner": {"name": "alice"}},
    "commits": [
        {
            "added": ["Wiki/Topics/Fireball.md", "README.txt"],
            "modified": ["Wiki/Topics/Combat.md", "Other/x.md"],
        },
        {"added": [], "modified": ["Wiki/Topics/Fireball.md"]},
    ],
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture(autouse=True)
def _settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vaultwiki.config.settings.raw_content_base_url", BASE_URL)
    monkeypatch.setattr("vaultwiki.config.settings.git_branch", "main")
    monkeypatch.setattr("vaultwiki.config.settings.wiki_directory", "")
    monkeypatch.setattr("vaultwiki.config.settings.local_git_path", None)


def _fake_fetch(documents: dict[str, str]):
    calls = []

    def fetch(owner, repo, branch, files):
        calls.append((owner, repo, branch, list(files)))
        return [(f, documents[f]) for f in files if f in documents]

    fetch.calls = calls  # type: ignore[attr-defined]
    return fetch


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------

class TestPayload:
    def test_branch_of(self) -> None:
        assert branch_of({"ref": "refs/heads/feature/x"}) == "feature/x"
        assert branch_of({}) is None

    def test_repository_of(self) -> None:
        assert repository_of(PAYLOAD) == ("alice", "vault")

    def test_repository_of_login_and_full_name(self) -> None:
        assert repository_of({"repository": {"name": "r", "owner": {"login": "bob"}}}) == ("bob", "r")
        assert repository_of({"repository": {"full_name": "carol/notes"}}) == ("carol", "notes")

    def test_extract_modified_files_in_subdir(self) -> None:
        assert extract_modified_files(PAYLOAD, "Wiki") == [
            "Wiki/Topics/Fireball.md",
            "Wiki/Topics/Combat.md",
        ]

    def test_extract_modified_files_everything(self) -> None:
        assert extract_modified_files(PAYLOAD) == [
            "Wiki/Topics/Fireball.md",
            "Wiki/Topics/Combat.md",
            "Other/x.md",
        ]

    def test_subdir_needs_directory_boundary(self) -> None:
        payload = {"commits": [{"added": ["Wikipedia/x.md", "Wiki/y.md"]}]}
        assert extract_modified_files(payload, "Wiki/") == ["Wiki/y.md"]


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------

class TestFetchFileContents:
    def test_fetches_raw_files(self) -> None:
        with respx.mock:
            respx.get(f"{BASE_URL}/alice/vault/main/Wiki/Fire%20ball.md").mock(
                return_value=httpx.Response(200, text="hot")
            )
            respx.get(f"{BASE_URL}/alice/vault/main/Wiki/Gone.md").mock(
                return_value=httpx.Response(404)
            )
            contents = fetch_file_contents(
                "alice", "vault", "main", ["Wiki/Fire ball.md", "Wiki/Gone.md"]
            )

        assert contents == [("Wiki/Fire ball.md", "hot")]

    def test_network_error_is_skipped(self) -> None:
        with respx.mock:
            respx.get(f"{BASE_URL}/alice/vault/main/a.md").mock(
                side_effect=httpx.ConnectError("refused")
            )
            assert fetch_file_contents("alice", "vault", "main", ["a.md"]) == []


# ---------------------------------------------------------------------------
# Webhook import
# ---------------------------------------------------------------------------

class TestImportFromWebhook:
    def test_imports_changed_files(self, conn: sqlite3.Connection) -> None:
        fetch = _fake_fetch(
            {
                "Wiki/Topics/Fireball.md": "---\nlevel: 3\n---\nBurns. [[Combat]]",
                "Wiki/Topics/Combat.md": "Swords. [[Wiki/Topics/Fireball]]",
            }
        )
        result = import_from_webhook(conn, PAYLOAD, wiki_subdir="Wiki", fetch=fetch)

        assert fetch.calls == [
            ("alice", "vault", "main", ["Wiki/Topics/Fireball.md", "Wiki/Topics/Combat.md"])
        ]
        assert result.message == "Webhook import completed successfully"
        assert result.stats.articles_imported == 2
        assert result.stats.relations_created == 2
        assert list_article_paths(conn) == ["Topics/Combat", "Topics/Fireball"]
        fireball = get_article(conn, "Topics/Fireball")
        assert fireball is not None
        assert fireball.metadata == {"level": 3}
        assert fireball.content == "Burns. [[Combat]]"

    def test_no_markdown_changes(self, conn: sqlite3.Connection) -> None:
        fetch = _fake_fetch({})
        payload = {"ref": "refs/heads/main", "commits": [{"added": ["logo.png"]}]}
        result = import_from_webhook(conn, payload, fetch=fetch)

        assert result.success is True
        assert result.message == "No markdown files were modified"
        assert result.stats.articles_imported == 0
        assert fetch.calls == []

    def test_empty_payload(self, conn: sqlite3.Connection) -> None:
        with pytest.raises(ValueError):
            import_from_webhook(conn, {})

    def test_batch_only_resolves_within_itself(self, conn: sqlite3.Connection) -> None:
        payload = {"ref": "refs/heads/main", "commits": [{"added": ["A.md"]}]}
        import_from_webhook(conn, payload, fetch=_fake_fetch({"A.md": "[[B]]"}))

        payload = {"ref": "refs/heads/main", "commits": [{"added": ["B.md"]}]}
        import_from_webhook(conn, payload, fetch=_fake_fetch({"B.md": "no links"}))

        assert list_article_paths(conn) == ["A", "B"]
        assert list_relations(conn) == []


# ---------------------------------------------------------------------------
# Local Git import
# ---------------------------------------------------------------------------

class _GitRecorder:
    """Stand-in for ``subprocess.run`` answering the git commands we issue."""

    def __init__(self, remote: str = "origin\n", heads: str = "abc123\trefs/heads/main\n") -> None:
        self.commands: list[list[str]] = []
        self.remote = remote
        self.heads = heads

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        sub = cmd[3]
        stdout = ""
        if sub == "remote":
            stdout = self.remote
        elif sub == "ls-remote":
            stdout = self.heads
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    @property
    def subcommands(self) -> list[str]:
        return [c[3] for c in self.commands]


@pytest.fixture()
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    (root / "Wiki" / "Topics").mkdir(parents=True)
    (root / "README.md").write_text("not part of the wiki", encoding="utf-8")
    (root / "Wiki" / "Topics" / "Fireball.md").write_text("[[Combat]]", encoding="utf-8")
    (root / "Wiki" / "Topics" / "Combat.md").write_text(
        "[[Wiki/Topics/Fireball]]", encoding="utf-8"
    )
    return root


class TestLocalGit:
    def test_sync_pulls_when_remote_has_branch(
        self, repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        recorder = _GitRecorder()
        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", recorder)

        sync_repository(repo, "main")

        assert recorder.subcommands == ["checkout", "remote", "ls-remote", "pull"]
        assert recorder.commands[0] == ["git", "-C", str(repo), "checkout", "main"]

    def test_sync_without_remote(self, repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        recorder = _GitRecorder(remote="")
        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", recorder)

        sync_repository(repo, "main")

        assert recorder.subcommands == ["checkout", "remote"]

    def test_sync_without_remote_branch(self, repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        recorder = _GitRecorder(heads="")
        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", recorder)

        sync_repository(repo, "main")

        assert "pull" not in recorder.subcommands

    def test_import(self, conn: sqlite3.Connection, repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", _GitRecorder())

        result = import_from_local_git(conn, repo_path=repo, branch="main", wiki_subdir="Wiki")

        assert result.stats.articles_imported == 2
        assert result.stats.relations_created == 2
        assert list_article_paths(conn) == ["Topics/Combat", "Topics/Fireball"]

    def test_defaults_from_settings(
        self, conn: sqlite3.Connection, repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        recorder = _GitRecorder()
        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", recorder)
        monkeypatch.setattr("vaultwiki.config.settings.local_git_path", repo)
        monkeypatch.setattr("vaultwiki.config.settings.git_branch", "wiki")
        monkeypatch.setattr("vaultwiki.config.settings.wiki_directory", "Wiki")

        import_from_local_git(conn)

        assert recorder.commands[0][-1] == "wiki"
        assert list_article_paths(conn) == ["Topics/Combat", "Topics/Fireball"]

    def test_git_failure(self, conn: sqlite3.Connection, repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def failing_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd, stderr="error: pathspec 'main' did not match")

        monkeypatch.setattr("vaultwiki.vault.git.subprocess.run", failing_run)

        with pytest.raises(VaultImportError) as excinfo:
            import_from_local_git(conn, repo_path=repo, branch="main")

        assert excinfo.value.stage == "git"
        assert "pathspec" in str(excinfo.value)
        assert list_article_paths(conn) == []

    def test_not_a_repository(self, conn: sqlite3.Connection, tmp_path: Path) -> None:
        with pytest.raises(VaultNotFoundError):
            import_from_local_git(conn, repo_path=tmp_path)

    def test_no_path_configured(self, conn: sqlite3.Connection) -> None:
        with pytest.raises(VaultNotFoundError):
            import_from_local_git(conn)
