"""
LLM enrichment for GQLAtlas
"""

from .client import LLMClient, LLMConfig, LLMResponse, create_llm_client
from .prompts import PromptTemplate, GraphQLPrompts
from .enrichment import EnrichmentResult, extract_payload, merge_enrichment
from .analyzer import LLMAnalyzer, create_llm_analyzer

__all__ = [
    'LLMClient',
    'LLMConfig',
    'LLMResponse',
    'create_llm_client',
    'PromptTemplate',
    'GraphQLPrompts',
    'EnrichmentResult',
    'extract_payload',
    'merge_enrichment',
    'LLMAnalyzer',
    'create_llm_analyzer',
]
