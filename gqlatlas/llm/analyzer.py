"""
LLM Analyzer - enrichment pass over the static analysis
"""

from __future__ import annotations

import json
import logging
from typing import List, Dict, Any, Optional

from ..exceptions import EnrichmentUnavailable
from ..models import AnalysisResult, ResolverInfo, SchemaNode, SourceKind
from .client import LLMClient, LLMConfig
from .enrichment import EnrichmentResult, merge_enrichment
from .prompts import GraphQLPrompts, PromptTemplate

logger = logging.getLogger(__name__)


class LLMAnalyzer:
    """Asks the configured provider for connections and resolver insights"""

    # Upper bound on resolver code sent per unknown resolver
    MAX_CODE_CHARS = 2000

    def __init__(self, client: Optional[LLMClient] = None,
                 config: Optional[LLMConfig] = None,
                 prompt: PromptTemplate = GraphQLPrompts.ANALYZE_SERVICE):
        self.client = client or LLMClient(config)
        self.prompt = prompt
        self.last_enrichment: Optional[EnrichmentResult] = None

    @property
    def is_available(self) -> bool:
        return self.client.is_available

    def build_prompt(self, schema_nodes: List[SchemaNode],
                     resolvers: List[ResolverInfo]) -> tuple:
        """System prompt and user message for one analysis request"""
        schema_context = json.dumps([n.to_dict() for n in schema_nodes], indent=2)
        resolver_context = json.dumps([self._resolver_context(r) for r in resolvers], indent=2)
        return self.prompt.get_messages(schema=schema_context, resolvers=resolver_context)

    def _resolver_context(self, resolver: ResolverInfo) -> Dict[str, Any]:
        context = resolver.to_dict()
        # Known resolvers keep their classification, so only unknown code is useful
        if resolver.source_kind == SourceKind.UNKNOWN and resolver.code:
            context['code'] = resolver.code[:self.MAX_CODE_CHARS]
        return context

    def analyze_connections(self, schema_nodes: List[SchemaNode],
                            resolvers: List[ResolverInfo]) -> AnalysisResult:
        """
        Run the enrichment request and merge its answer.

        Returns:
            AnalysisResult in "llm" mode carrying the external connections

        Raises:
            EnrichmentUnavailable: Request failed or the answer had no usable payload
        """
        system, user_message = self.build_prompt(schema_nodes, resolvers)
        response = self.client.complete(user_message, system=system)

        enrichment = merge_enrichment(resolvers, response.content)
        self.last_enrichment = enrichment
        if not enrichment.applied:
            raise EnrichmentUnavailable(self.client.config.provider,
                                        "Response carried no usable JSON payload")

        for pattern in enrichment.architecture_patterns:
            logger.info(f"Architecture pattern: {pattern}")

        return AnalysisResult(
            schema=list(schema_nodes),
            resolvers=enrichment.resolvers,
            connections=enrichment.connections,
            mode="llm",
        )


def create_llm_analyzer(config: Optional[LLMConfig] = None) -> LLMAnalyzer:
    """Factory function to create an LLM analyzer"""
    return LLMAnalyzer(config=config)
