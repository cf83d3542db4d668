"""
GQLAtlas - Connection graphs for GraphQL services.

Reads a GraphQL (subgraph) schema and the JavaScript/TypeScript source of
its resolvers, infers where each resolver gets its data, and builds a
directed graph linking schema types, resolvers and data sources.

Analysis Stages:
    1. Schema Model Builder - SDL to typed schema nodes (graphql-core)
    2. Resolver Classifier - tree-sitter candidate detection plus an
       ordered list of data-access rules
    3. Graph Synthesizer - resolves/calls/references edges
    4. Enrichment (optional) - LLM suggestions for unclassified resolvers

Quick Start:
    >>> from gqlatlas import AnalyzerConfig, run_analysis
    >>> config = AnalyzerConfig(schema="schema.graphql", resolvers=["src/resolvers"])
    >>> result = run_analysis(config)
    >>> print(f"{len(result.connections)} connections, {len(result.unknown_resolvers)} unclassified")

Output Formats:
    Console summary, JSON graph
"""

__version__ = "0.1.0"
__author__ = "GQLAtlas"

from .models import (
    AnalysisResult,
    ApiDetail,
    Connection,
    ConnectionKind,
    DatabaseDetail,
    NodeKind,
    ResolverInfo,
    SchemaField,
    SchemaNode,
    SourceKind,
)
from .exceptions import (
    GQLAtlasError,
    NotLoadedError,
    ParseError,
    SchemaParseError,
    PayloadParseError,
    FileAccessError,
    EnrichmentUnavailable,
)
from .schema_analyzer import SchemaAnalyzer
from .resolver_analyzer import ResolverAnalyzer
from .classifier import classify_source, classify_resolver
from .static_analyzer import StaticAnalyzer
from .config import AnalyzerConfig, load_config, write_config
from .pipeline import run_analysis

from .llm import (
    LLMClient, LLMConfig, create_llm_client,
    LLMAnalyzer, merge_enrichment, extract_payload,
)

from .reporters import ConsoleReporter, JSONReporter, get_reporter

__all__ = [
    # Models
    'AnalysisResult',
    'ApiDetail',
    'Connection',
    'ConnectionKind',
    'DatabaseDetail',
    'NodeKind',
    'ResolverInfo',
    'SchemaField',
    'SchemaNode',
    'SourceKind',
    # Errors
    'GQLAtlasError',
    'NotLoadedError',
    'ParseError',
    'SchemaParseError',
    'PayloadParseError',
    'FileAccessError',
    'EnrichmentUnavailable',
    # Stages
    'SchemaAnalyzer',
    'ResolverAnalyzer',
    'classify_source',
    'classify_resolver',
    'StaticAnalyzer',
    'AnalyzerConfig',
    'load_config',
    'write_config',
    'run_analysis',
    # Enrichment
    'LLMClient',
    'LLMConfig',
    'create_llm_client',
    'LLMAnalyzer',
    'merge_enrichment',
    'extract_payload',
    # Reporters
    'ConsoleReporter',
    'JSONReporter',
    'get_reporter',
]
