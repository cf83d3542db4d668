"""
Prompt Templates for LLM-based service enrichment
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Template


@dataclass
class PromptTemplate:
    """A reusable prompt template"""
    name: str
    system: str
    user_template: str
    description: str = ""

    def format(self, **kwargs) -> str:
        """Format the user template with provided values"""
        return Template(self.user_template).safe_substitute(**kwargs)

    def get_messages(self, **kwargs) -> tuple:
        """Get system prompt and formatted user message"""
        return self.system, self.format(**kwargs)


class GraphQLPrompts:
    """Prompts used by the enrichment pass"""

    SERVICE_ANALYST_SYSTEM = """You are an expert GraphQL service analyzer. You read a schema together with the resolvers that implement it and explain where each field's data comes from.

Answer with a single JSON object and nothing else. Only describe resolvers and types that appear in the input."""

    ANALYZE_SERVICE = PromptTemplate(
        name="analyze_service",
        description="Infer connections and data sources for a GraphQL service",
        system=SERVICE_ANALYST_SYSTEM,
        user_template="""I'll provide you with a GraphQL schema and resolver information.
Analyze the connections between schema types and resolvers, and identify data flow patterns.

SCHEMA:
$schema

RESOLVERS:
$resolvers

Please analyze this GraphQL service and provide the following:

1. Connections between schema types (references)
2. Connections between resolvers and data sources (calls, resolves)
3. Data flow patterns and dependencies between resolvers
4. Any additional insights about the service architecture

For every resolver whose sourceType is "unknown", infer its source type from its code.

Format your response as JSON with the following structure:
{
  "connections": [
    {
      "from": "TypeName or ResolverPath",
      "to": "TypeName, ResolverPath, DB:<model> or API:<endpoint>",
      "type": "references|calls|resolves",
      "description": "Brief description of the connection"
    }
  ],
  "resolverInsights": [
    {
      "path": "ResolverPath",
      "inferred_source_type": "database|api|computed|unknown",
      "inferred_details": {
        "type": "prisma|mongoose|sequelize|typeorm|raw-sql|rest|graphql|grpc|other",
        "model": "for database resolvers",
        "operation": "findMany|findUnique|create|update|delete|other",
        "endpoint": "for api resolvers",
        "method": "HTTP method for rest resolvers"
      },
      "dependencies": ["Other.resolverPath"],
      "description": "Explanation of what this resolver does"
    }
  ],
  "architecturePatterns": [
    "Description of identified architecture pattern"
  ]
}""",
    )
