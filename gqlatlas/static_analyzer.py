"""
Static Analyzer - builds the connection graph without an external oracle
"""

from __future__ import annotations

import logging
from typing import List

from .models import (
    AnalysisResult,
    Connection,
    ConnectionKind,
    ResolverInfo,
    SchemaNode,
    SourceKind,
    BUILTIN_SCALARS,
)

logger = logging.getLogger(__name__)


class StaticAnalyzer:
    """Derives typed edges from schema nodes and classified resolvers

    Edges are emitted per resolver first (input order), then per schema
    node (input order). Parallel edges are kept.
    """

    def analyze_connections(self, schema_nodes: List[SchemaNode],
                            resolvers: List[ResolverInfo]) -> AnalysisResult:
        connections = self.build_connections(schema_nodes, resolvers)
        return AnalysisResult(
            schema=list(schema_nodes),
            resolvers=list(resolvers),
            connections=connections,
            mode="static",
        )

    def build_connections(self, schema_nodes: List[SchemaNode],
                          resolvers: List[ResolverInfo]) -> List[Connection]:
        connections: List[Connection] = []

        for resolver in resolvers:
            connections.extend(self._resolver_connections(resolver))

        for node in schema_nodes:
            connections.extend(self._reference_connections(node))

        logger.info(f"Synthesized {len(connections)} connections")
        return connections

    def _resolver_connections(self, resolver: ResolverInfo) -> List[Connection]:
        path = resolver.path
        edges = [Connection(
            source=path,
            target=resolver.type_name,
            kind=ConnectionKind.RESOLVES,
            description=f"Resolver for {path}",
        )]

        if resolver.source_kind == SourceKind.DATABASE and resolver.database_detail:
            detail = resolver.database_detail
            model = detail.model or 'unknown'
            edges.append(Connection(
                source=path,
                target=f"DB:{model}",
                kind=ConnectionKind.CALLS,
                description=f"Accesses {model} via {detail.engine}",
            ))
        elif resolver.source_kind == SourceKind.API and resolver.api_detail:
            detail = resolver.api_detail
            description = f"Calls {detail.protocol} API"
            if detail.endpoint:
                description += f" at {detail.endpoint}"
            edges.append(Connection(
                source=path,
                target=f"API:{detail.endpoint or detail.protocol}",
                kind=ConnectionKind.CALLS,
                description=description,
            ))

        for dependency in resolver.dependencies:
            edges.append(Connection(
                source=path,
                target=dependency,
                kind=ConnectionKind.CALLS,
                description=f"Depends on {dependency}",
            ))

        return edges

    @staticmethod
    def _reference_connections(node: SchemaNode) -> List[Connection]:
        return [
            Connection(
                source=node.name,
                target=schema_field.declared_type,
                kind=ConnectionKind.REFERENCES,
                description=f"{node.name} references {schema_field.declared_type} via {schema_field.name} field",
            )
            for schema_field in node.fields or []
            if schema_field.declared_type not in BUILTIN_SCALARS
        ]
