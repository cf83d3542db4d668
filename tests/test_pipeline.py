"""Tests for gqlatlas.pipeline.run_analysis"""

import pytest
from unittest.mock import MagicMock
from graphql import build_schema

from gqlatlas.pipeline import run_analysis
from gqlatlas.config import AnalyzerConfig
from gqlatlas.llm.client import LLMConfig, LLMResponse
from gqlatlas.models import SourceKind, ConnectionKind
from gqlatlas.exceptions import SchemaParseError, EnrichmentUnavailable


@pytest.fixture
def config(schema_file, resolvers_dir):
    return AnalyzerConfig(schema=str(schema_file), resolvers=[str(resolvers_dir)])


def _llm_config():
    return LLMConfig(provider="custom", endpoint="http://llm.local")


class TestStaticRun:
    def test_static(self, config):
        result = run_analysis(config)
        assert result.mode == "static"
        assert result.errors == []
        assert len(result.resolvers) == 11
        assert {r.path for r in result.unknown_resolvers} == {"Query.search", "Review.rating"}

    def test_post_references_user(self, config):
        result = run_analysis(config)
        post_edges = [(c.target, c.kind) for c in result.connections if c.source == "Post"]
        assert ("User", ConnectionKind.REFERENCES) in post_edges
        assert ("Comment", ConnectionKind.REFERENCES) in post_edges

    def test_deterministic(self, config):
        first = run_analysis(config).to_dict()
        second = run_analysis(config).to_dict()
        assert first == second

    def test_missing_resolver_path_is_not_fatal(self, config, tmp_path):
        config.resolvers.append(str(tmp_path / "missing"))
        result = run_analysis(config)
        assert len(result.errors) == 1
        assert len(result.resolvers) == 11

    def test_schema_failure_is_fatal(self, resolvers_dir):
        config = AnalyzerConfig(schema="type Query { broken: }", resolvers=[str(resolvers_dir)])
        with pytest.raises(SchemaParseError):
            run_analysis(config)

    def test_no_schema(self):
        with pytest.raises(SchemaParseError):
            run_analysis(AnalyzerConfig())

    def test_executable_schema_resolvers_appended(self, config):
        schema = build_schema("type Query { size: Int }")
        schema.query_type.fields["size"].resolve = len
        result = run_analysis(config, executable_schema=schema)
        assert result.resolvers[-1].path == "Query.size"
        assert len(result.resolvers) == 12


class TestEnrichedRun:
    def test_llm_mode_uses_external_edges(self, config, enrichment_response):
        config.llm = _llm_config()
        client = MagicMock()
        client.config = config.llm
        client.complete.return_value = LLMResponse(content=enrichment_response, model=None, provider="custom")

        result = run_analysis(config, llm_client=client)

        assert result.mode == "llm"
        assert result.errors == []
        assert len(result.connections) == 3
        assert result.get_resolver("Query.search").source_kind == SourceKind.API
        assert result.get_resolver("Query.users").source_kind == SourceKind.DATABASE
        assert {r.path for r in result.unknown_resolvers} == {"Review.rating"}

    def test_unavailable_enrichment_degrades_to_static(self, config):
        config.llm = _llm_config()
        client = MagicMock()
        client.config = config.llm
        client.complete.side_effect = EnrichmentUnavailable("custom", "connection refused")

        result = run_analysis(config, llm_client=client)

        assert result.mode == "static"
        assert result.errors == ["[custom] connection refused"]
        assert result.get_resolver("Query.search").source_kind == SourceKind.UNKNOWN
        assert len(result.get_connections_by_kind(ConnectionKind.RESOLVES)) == 11

    def test_malformed_response_degrades_to_static(self, config):
        config.llm = _llm_config()
        client = MagicMock()
        client.config = config.llm
        client.complete.return_value = LLMResponse(content="no idea", model=None, provider="custom")

        result = run_analysis(config, llm_client=client)

        assert result.mode == "static"
        assert len(result.errors) == 1
