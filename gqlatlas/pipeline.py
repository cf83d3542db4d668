"""
Analysis pipeline - schema, resolvers, then connections, as one run
"""

from __future__ import annotations

import logging
from typing import List, Optional

from graphql import GraphQLSchema

from .config import AnalyzerConfig
from .exceptions import EnrichmentUnavailable, SchemaParseError
from .llm.analyzer import LLMAnalyzer
from .llm.client import LLMClient
from .models import AnalysisResult, ResolverInfo
from .resolver_analyzer import ResolverAnalyzer
from .schema_analyzer import SchemaAnalyzer
from .static_analyzer import StaticAnalyzer

logger = logging.getLogger(__name__)


def run_analysis(config: AnalyzerConfig,
                 llm_client: Optional[LLMClient] = None,
                 executable_schema: Optional[GraphQLSchema] = None) -> AnalysisResult:
    """
    Run one analysis.

    Resolvers attached to `executable_schema`, if given, are classified
    too and appended after the file-based ones.

    Raises:
        SchemaParseError: If the schema cannot be loaded
    """
    if not config.schema:
        raise SchemaParseError("No schema source configured")

    errors: List[str] = []

    schema_analyzer = SchemaAnalyzer()
    schema_analyzer.load_schema(config.schema)
    schema_nodes = schema_analyzer.analyze()

    resolver_analyzer = ResolverAnalyzer()
    resolver_analyzer.load_resolver_files(config.resolvers)
    resolvers: List[ResolverInfo] = resolver_analyzer.analyze_resolvers()
    if executable_schema is not None:
        resolvers.extend(resolver_analyzer.analyze_resolvers_from_schema(executable_schema))
    errors.extend(resolver_analyzer.errors)

    result: Optional[AnalysisResult] = None
    if config.llm.enabled:
        analyzer = LLMAnalyzer(client=llm_client or LLMClient(config.llm))
        try:
            result = analyzer.analyze_connections(schema_nodes, resolvers)
        except EnrichmentUnavailable as e:
            logger.warning(f"LLM enrichment unavailable, using static analysis: {e}")
            errors.append(str(e))

    if result is None:
        result = StaticAnalyzer().analyze_connections(schema_nodes, resolvers)

    result.errors = errors
    logger.info(
        f"Analysis complete ({result.mode}): {len(result.schema)} nodes, "
        f"{len(result.resolvers)} resolvers, {len(result.connections)} connections"
    )
    if result.unknown_resolvers:
        logger.warning(f"{len(result.unknown_resolvers)} resolvers could not be classified")
    return result
