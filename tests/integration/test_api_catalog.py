"""
Integration tests for the catalog API.

Runs the FastAPI app in-process against a generated marketplace.
"""

import pytest
from fastapi.testclient import TestClient

from rails_expert.config import reload_settings
from rails_expert.lib.logger import get_log_buffer, setup_logging
from rails_expert.server import app

from tests.conftest import make_repo, write_text


@pytest.fixture
def client(repo):
    reload_settings(repo_path=repo)
    return TestClient(app)


class TestServerHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Rails Expert Catalog"

    def test_health_endpoint(self, client, repo):
        data = client.get("/api/health").json()
        assert data["status"] == "ok"
        assert data["repoPath"] == str(repo)
        assert data["marketplace"] is True

    def test_logs_limit_validated(self, client):
        assert client.get("/api/logs", params={"limit": 10}).status_code == 200
        assert client.get("/api/logs", params={"limit": 0}).status_code == 422

    def test_logs_filtered_by_check(self, client):
        setup_logging(level="INFO")
        get_log_buffer().clear()
        client.get("/api/checks", params={"only": "bang"})
        entries = client.get("/api/logs", params={"check": "bang"}).json()["entries"]
        assert [e["check"] for e in entries] == ["bang"]
        assert client.get("/api/logs", params={"check": "links"}).json()["entries"] == []


class TestPluginsAPI:
    def test_list(self, client):
        plugins = client.get("/api/plugins").json()["plugins"]
        assert [p["name"] for p in plugins] == ["rails-expert"]
        assert plugins[0]["hookEvents"] == ["PreToolUse"]

    def test_detail(self, client):
        data = client.get("/api/plugins/rails-expert").json()
        assert data["version"] == "0.3.0"
        assert data["manifest"]["author"] == {"name": "Test Owner"}

    def test_unknown_plugin(self, client):
        assert client.get("/api/plugins/nope").status_code == 404

    def test_agents(self, client):
        agents = client.get("/api/plugins/rails-expert/agents").json()["agents"]
        by_name = {a["name"]: a for a in agents}
        assert by_name["rails-expert"]["tools"] == ["Read", "Grep", "Glob"]
        assert "systemPrompt" not in by_name["rails-expert"]
        assert by_name["active-record-specialist"]["model"] == "sonnet"

    def test_commands(self, client):
        commands = client.get("/api/plugins/rails-expert/commands").json()["commands"]
        review = next(c for c in commands if c["name"] == "db:review")
        assert review["invocation"] == "/db:review"
        assert review["allowedTools"] == ["Read", "Bash(bin/rails db:*)"]
        assert "body" not in review

    def test_skills(self, client):
        skills = client.get("/api/plugins/rails-expert/skills").json()["skills"]
        assert [s["name"] for s in skills] == ["active-record"]

    def test_hooks(self, client):
        hooks = client.get("/api/plugins/rails-expert/hooks").json()["hooks"]
        assert hooks["PreToolUse"][0]["matcher"] == "Write|Edit"

    def test_broken_marketplace(self, client, repo):
        (repo / ".claude-plugin" / "marketplace.json").write_text("not json")
        assert client.get("/api/plugins").status_code == 500


class TestChecksAPI:
    def test_all_pass(self, client):
        data = client.get("/api/checks").json()
        assert data["ok"] is True
        assert len(data["checks"]) == 6

    def test_only(self, tmp_path):
        repo = make_repo(tmp_path / "r", version="0.3.0", market_version="0.2.9")
        reload_settings(repo_path=repo)
        client = TestClient(app)
        data = client.get("/api/checks", params=[("only", "versions"), ("only", "bang")]).json()
        assert data["checks"] == {"versions": False, "bang": True}

    def test_configured_skip(self, repo):
        write_text(repo / ".rails-expert.yaml", "skip_checks: [links]\n")
        reload_settings(repo_path=repo)
        data = TestClient(app).get("/api/checks").json()
        assert "links" not in data["checks"]

    def test_unknown_check(self, client):
        assert client.get("/api/checks", params={"only": "spelling"}).status_code == 400
