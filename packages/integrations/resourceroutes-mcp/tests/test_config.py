"""Tests for config loading and config-driven router building."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from resourceroutes_core import DuplicateResourceError, TextResourceHandler
from resourceroutes_fs import FileResourceHandler
from resourceroutes_http import HTTPResourceHandler
from resourceroutes_mcp.config import (
    ResourceConfig,
    RootConfig,
    ServerConfig,
    load_config,
    resolve_env_vars,
)
from resourceroutes_mcp.server import SUPPORTED_PROVIDERS, _resolve_handler, build_router


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ------------------------------------------------------------------
# Config models
# ------------------------------------------------------------------


class TestResourceConfig:
    def test_minimal(self):
        cfg = ResourceConfig(path="(config)/motd", provider="text")
        assert cfg.path == "(config)/motd"
        assert cfg.options == {}

    def test_missing_provider_raises(self):
        with pytest.raises(ValidationError):
            ResourceConfig(path="(config)/motd")  # type: ignore[call-arg]


class TestRootConfig:
    def test_extensions_default_none(self):
        assert RootConfig(path="./resources").extensions is None


class TestServerConfig:
    def test_with_roots(self):
        cfg = ServerConfig(name="Test", roots=[RootConfig(path="./resources")])
        assert cfg.instructions is None
        assert cfg.resources == []

    def test_with_resources(self):
        cfg = ServerConfig(
            name="Test",
            resources=[ResourceConfig(path="(config)/motd", provider="text")],
        )
        assert cfg.roots == []

    def test_empty_raises(self):
        with pytest.raises(ValidationError, match="at least one entry"):
            ServerConfig(name="Test")

    def test_missing_name_raises(self):
        with pytest.raises(ValidationError):
            ServerConfig(roots=[RootConfig(path=".")])  # type: ignore[call-arg]

    def test_from_json(self):
        raw = json.dumps(
            {
                "name": "Docs",
                "instructions": "Read docs:// resources.",
                "roots": [{"path": "./resources", "extensions": [".md"]}],
            }
        )
        cfg = ServerConfig.model_validate_json(raw)
        assert cfg.roots[0].extensions == [".md"]
        assert cfg.instructions == "Read docs:// resources."


# ------------------------------------------------------------------
# load_config
# ------------------------------------------------------------------


class TestLoadConfig:
    def test_json(self, tmp_path):
        path = _write(tmp_path, "server.json", json.dumps({"name": "J", "roots": [{"path": "r"}]}))
        assert load_config(path).name == "J"

    def test_yaml(self, tmp_path):
        path = _write(tmp_path, "server.yaml", "name: Y\nroots:\n  - path: r\n")
        assert load_config(path).roots[0].path == "r"

    def test_yml_extension(self, tmp_path):
        path = _write(tmp_path, "server.yml", "name: Y\nroots:\n  - path: r\n")
        assert load_config(path).name == "Y"

    def test_env_vars_resolved(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RESOURCE_ROOT", "/srv/resources")
        data = {"name": "E", "roots": [{"path": "${RESOURCE_ROOT}"}]}
        path = _write(tmp_path, "server.json", json.dumps(data))
        assert load_config(path).roots[0].path == "/srv/resources"

    def test_invalid_raises(self, tmp_path):
        path = _write(tmp_path, "server.json", json.dumps({"name": "Empty"}))
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")


# ------------------------------------------------------------------
# Environment variable resolution
# ------------------------------------------------------------------


class TestResolveEnvVars:
    """Tests for ${VAR} placeholder resolution in config data."""

    def test_simple_string_replacement(self, monkeypatch):
        monkeypatch.setenv("MY_TOKEN", "secret123")
        assert resolve_env_vars("Bearer ${MY_TOKEN}") == "Bearer secret123"

    def test_unset_var_resolves_to_empty(self, monkeypatch):
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert resolve_env_vars("prefix-${NONEXISTENT_VAR_XYZ}-suffix") == "prefix--suffix"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("GREETING_NAME", raising=False)
        assert resolve_env_vars("Hi ${GREETING_NAME:-guest}") == "Hi guest"

    def test_default_used_when_empty(self, monkeypatch):
        monkeypatch.setenv("GREETING_NAME", "")
        assert resolve_env_vars("${GREETING_NAME:-guest}") == "guest"

    def test_default_ignored_when_set(self, monkeypatch):
        monkeypatch.setenv("GREETING_NAME", "ada")
        assert resolve_env_vars("${GREETING_NAME:-guest}") == "ada"

    def test_empty_default(self, monkeypatch):
        monkeypatch.delenv("GREETING_NAME", raising=False)
        assert resolve_env_vars("[${GREETING_NAME:-}]") == "[]"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("SECRET", "s3cret")
        data = {"headers": {"Authorization": "Bearer ${SECRET}"}, "list": ["${SECRET}", 1]}
        result = resolve_env_vars(data)
        assert result["headers"]["Authorization"] == "Bearer s3cret"
        assert result["list"] == ["s3cret", 1]

    def test_non_string_scalars_unchanged(self):
        assert resolve_env_vars(42) == 42
        assert resolve_env_vars(True) is True
        assert resolve_env_vars(None) is None

    def test_dollar_without_braces_not_replaced(self):
        assert resolve_env_vars("$VAR") == "$VAR"

    def test_warning_logged_for_unset_var(self, monkeypatch, caplog):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with caplog.at_level(logging.WARNING, logger="resourceroutes_mcp.config"):
            resolve_env_vars("${MISSING_VAR}")
        assert "MISSING_VAR" in caplog.text

    def test_no_warning_when_default_given(self, monkeypatch, caplog):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with caplog.at_level(logging.WARNING, logger="resourceroutes_mcp.config"):
            resolve_env_vars("${MISSING_VAR:-x}")
        assert caplog.text == ""


# ------------------------------------------------------------------
# Handler resolution
# ------------------------------------------------------------------


class TestResolveHandler:
    def test_supported_providers_constant(self):
        assert SUPPORTED_PROVIDERS == {"file", "http", "text"}

    async def test_text_provider(self, tmp_path):
        handler = _resolve_handler("text", {"text": "Hello {{name}}"}, base_dir=tmp_path)
        assert isinstance(handler, TextResourceHandler)
        assert await handler.read({"name": "Ada"}) == "Hello Ada"

    def test_text_provider_requires_text(self, tmp_path):
        with pytest.raises(ValueError, match="'text' option"):
            _resolve_handler("text", {}, base_dir=tmp_path)

    def test_file_provider_relative_to_base_dir(self, tmp_path):
        handler = _resolve_handler("file", {"file": "motd.txt"}, base_dir=tmp_path)
        assert isinstance(handler, FileResourceHandler)
        assert handler.path == tmp_path / "motd.txt"

    def test_file_provider_requires_file(self, tmp_path):
        with pytest.raises(ValueError, match="'file' option"):
            _resolve_handler("file", {}, base_dir=tmp_path)

    def test_http_provider(self, tmp_path):
        handler = _resolve_handler(
            "http",
            {"url": "https://cdn.example.com/{page}.md", "headers": {"X-Key": "k"}},
            base_dir=tmp_path,
        )
        assert isinstance(handler, HTTPResourceHandler)
        assert handler.url == "https://cdn.example.com/{page}.md"

    def test_http_provider_ignores_unknown_options(self, tmp_path):
        handler = _resolve_handler(
            "http",
            {"url": "https://cdn.example.com/a.md", "client": "not-a-client", "bogus": 1},
            base_dir=tmp_path,
        )
        assert isinstance(handler, HTTPResourceHandler)

    def test_http_provider_requires_url(self, tmp_path):
        with pytest.raises(ValueError, match="'url' option"):
            _resolve_handler("http", {}, base_dir=tmp_path)

    def test_unknown_provider_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown provider type"):
            _resolve_handler("ftp", {}, base_dir=tmp_path)


# ------------------------------------------------------------------
# build_router
# ------------------------------------------------------------------


class TestBuildRouter:
    def test_roots_relative_to_base_dir(self, tmp_path):
        _write(tmp_path, "resources/(users)/[userId]/profile.md", "Profile of {{userId}}")
        config = ServerConfig(name="T", roots=[RootConfig(path="resources")])
        router, errors = build_router(config, base_dir=tmp_path)
        assert errors == []
        assert "users://[userId]/profile" in router.table

    async def test_inline_resources(self, tmp_path):
        config = ServerConfig(
            name="T",
            resources=[
                ResourceConfig(path="(config)/motd", provider="text", options={"text": "Hi"})
            ],
        )
        router, _ = build_router(config, base_dir=tmp_path)
        match = router.match("config://motd")
        assert await match.handler.read(match.params) == "Hi"

    def test_root_extensions(self, tmp_path):
        _write(tmp_path, "r/(docs)/a.md", "a")
        _write(tmp_path, "r/(docs)/b.txt", "b")
        config = ServerConfig(name="T", roots=[RootConfig(path="r", extensions=[".txt"])])
        router, _ = build_router(config, base_dir=tmp_path)
        assert [d.uri_template for d in router.table.definitions] == ["docs://b"]

    def test_conflicts_reported_not_fatal(self, tmp_path):
        _write(tmp_path, "r/(config)/motd.txt", "from disk")
        config = ServerConfig(
            name="T",
            roots=[RootConfig(path="r")],
            resources=[
                ResourceConfig(path="(config)/motd", provider="text", options={"text": "inline"}),
                ResourceConfig(path="(config)/banner", provider="text", options={"text": "b"}),
            ],
        )
        router, errors = build_router(config, base_dir=tmp_path)
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateResourceError)
        assert len(router.table) == 2

    def test_missing_root_raises(self, tmp_path):
        config = ServerConfig(name="T", roots=[RootConfig(path="missing")])
        with pytest.raises(NotADirectoryError):
            build_router(config, base_dir=tmp_path)

    def test_unknown_provider_raises(self, tmp_path):
        config = ServerConfig(
            name="T", resources=[ResourceConfig(path="(config)/x", provider="ftp")]
        )
        with pytest.raises(ValueError, match="Unknown provider type"):
            build_router(config, base_dir=tmp_path)


# ------------------------------------------------------------------
# CLI (__main__.py) tests
# ------------------------------------------------------------------


class TestCLI:
    """Tests for the CLI entry point (__main__.py)."""

    def test_argparse_requires_config(self):
        from resourceroutes_mcp.__main__ import main

        with patch("sys.argv", ["resourceroutes_mcp"]), pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 2

    def test_missing_config_file_exits(self, tmp_path):
        from resourceroutes_mcp.__main__ import main

        missing = str(tmp_path / "nonexistent.json")
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", missing]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1

    def test_invalid_config_exits(self, tmp_path, capsys):
        from resourceroutes_mcp.__main__ import main

        config_file = _write(tmp_path, "server.json", json.dumps({"name": "Empty"}))
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1
        assert "invalid config file" in capsys.readouterr().err

    def test_no_resources_exits(self, tmp_path, capsys):
        from resourceroutes_mcp.__main__ import main

        (tmp_path / "empty").mkdir()
        config_file = _write(
            tmp_path, "server.json", json.dumps({"name": "E", "roots": [{"path": "empty"}]})
        )
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1
        assert "no resources" in capsys.readouterr().err

    def test_yaml_config_runs_server(self, tmp_path):
        from resourceroutes_mcp.__main__ import main

        _write(tmp_path, "resources/(config)/app.json", "{}")
        config_file = _write(
            tmp_path, "server.yaml", "name: YAML Server\nroots:\n  - path: resources\n"
        )
        server = MagicMock()
        with (
            patch(
                "sys.argv",
                [
                    "resourceroutes_mcp",
                    "--config",
                    str(config_file),
                    "--transport",
                    "streamable-http",
                ],
            ),
            patch("resourceroutes_mcp.__main__.create_mcp_server", return_value=server) as create,
        ):
            main()
        create.assert_called_once()
        assert create.call_args.kwargs["name"] == "YAML Server"
        server.run.assert_called_once_with(transport="streamable-http")

    def test_skipped_resources_reported(self, tmp_path, capsys):
        from resourceroutes_mcp.__main__ import main

        _write(tmp_path, "resources/(config)/app.json", "{}")
        _write(tmp_path, "resources/(users)/[bad name]/profile.md", "x")
        config_file = _write(
            tmp_path, "server.json", json.dumps({"name": "S", "roots": [{"path": "resources"}]})
        )
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            patch("resourceroutes_mcp.__main__.create_mcp_server"),
        ):
            main()
        assert "skipped resource" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("filename", "content"),
        [
            ("server.json", "{not json"),
            ("server.yaml", "name: [unclosed\nroots: {"),
        ],
    )
    def test_unparsable_config_exits(self, tmp_path, capsys, filename, content):
        from resourceroutes_mcp.__main__ import main

        config_file = _write(tmp_path, filename, content)
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1
        assert "Error: invalid config file" in capsys.readouterr().err

    def test_missing_root_exits(self, tmp_path, capsys):
        from resourceroutes_mcp.__main__ import main

        config_file = _write(
            tmp_path, "server.json", json.dumps({"name": "M", "roots": [{"path": "missing"}]})
        )
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1
        assert "Resource root does not exist" in capsys.readouterr().err

    def test_unknown_provider_exits(self, tmp_path, capsys):
        from resourceroutes_mcp.__main__ import main

        data = {"name": "U", "resources": [{"path": "(config)/x", "provider": "ftp"}]}
        config_file = _write(tmp_path, "server.json", json.dumps(data))
        with (
            patch("sys.argv", ["resourceroutes_mcp", "--config", str(config_file)]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 1
        assert "Unknown provider type" in capsys.readouterr().err
