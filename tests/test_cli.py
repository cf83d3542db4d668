"""Tests for gqlatlas.cli"""

import json
import pytest
from gqlatlas.cli import main, parse_args
from gqlatlas.config import load_config


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GQLATLAS_LLM_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestParseArgs:
    def test_analyze_flags(self):
        args = parse_args(["analyze", "-s", "schema.graphql", "-r", "a", "b", "-f", "json"])
        assert args.command == "analyze"
        assert args.resolvers == ["a", "b"]
        assert args.format == "json"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestInit:
    def test_writes_config(self, workdir):
        code = main(["init", "--schema", "api/schema.graphql", "--resolvers", "api/resolvers", "--provider", "openai"])
        assert code == 0

        config = load_config(workdir / "gqlatlas.yml")
        assert config.schema == str(workdir / "api" / "schema.graphql")
        assert config.resolvers == [str(workdir / "api" / "resolvers")]
        assert config.llm.provider == "openai"
        assert config.project_name == workdir.name

    def test_refuses_to_overwrite(self, workdir):
        assert main(["init"]) == 0
        assert main(["init"]) == 1
        assert main(["init", "--force"]) == 0


class TestAnalyze:
    def test_json_output(self, workdir, schema_file, resolvers_dir):
        output = workdir / "graph.json"
        code = main(["analyze", "-s", str(schema_file), "-r", str(resolvers_dir), "-f", "json", "-o", str(output)])
        assert code == 0
        data = json.loads(output.read_text())
        assert data["mode"] == "static"
        assert any(c["from"] == "Post" and c["to"] == "User" for c in data["connections"])

    def test_console_output_with_config(self, workdir, schema_file, resolvers_dir, capsys):
        (workdir / "gqlatlas.yml").write_text(
            f"schema: {schema_file}\nresolvers:\n  - {resolvers_dir}\noutput: graph.json\n"
        )
        code = main(["analyze", "--no-color"])
        assert code == 0
        out = capsys.readouterr().out
        assert "UNCLASSIFIED RESOLVERS (2):" in out
        assert (workdir / "graph.json").exists()

    def test_missing_schema(self, capsys):
        assert main(["analyze"]) == 1
        assert "No schema" in capsys.readouterr().err

    def test_missing_config_file(self):
        assert main(["analyze", "--config", "nope.yml"]) == 1

    def test_invalid_llm_timeout(self, workdir, capsys):
        (workdir / "gqlatlas.yml").write_text("schema: s.graphql\nllm:\n  provider: openai\n  timeout: soon\n")
        assert main(["analyze"]) == 1
        assert "llm.timeout" in capsys.readouterr().err

    def test_invalid_schema(self, resolvers_dir):
        assert main(["analyze", "-s", "type Query {", "-r", str(resolvers_dir)]) == 1

    def test_recorded_errors_exit_2(self, workdir, schema_file):
        code = main(["analyze", "-s", str(schema_file), "-r", str(workdir / "missing"), "-f", "json",
                     "-o", str(workdir / "graph.json")])
        assert code == 2

    def test_provider_override_without_key_degrades(self, workdir, schema_file, resolvers_dir):
        code = main(["analyze", "-s", str(schema_file), "-r", str(resolvers_dir), "--provider", "anthropic",
                     "-f", "json", "-o", str(workdir / "graph.json")])
        assert code == 2
        data = json.loads((workdir / "graph.json").read_text())
        assert data["mode"] == "static"
        assert "anthropic" in data["errors"][0]
