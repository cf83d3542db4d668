"""
Enrichment merge - folds external classification suggestions into the
static resolver classifications.

Static evidence always wins: a resolver with a known source kind is never
changed. Only `unknown` resolvers adopt a suggested kind, and dependencies
are unioned. Nothing is mutated; merged resolvers are new values.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import PayloadParseError
from ..models import ApiDetail, Connection, DatabaseDetail, ResolverInfo, SourceKind

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentResult:
    """Outcome of merging one enrichment response"""
    resolvers: List[ResolverInfo]
    connections: List[Connection] = field(default_factory=list)
    applied: bool = False
    architecture_patterns: List[str] = field(default_factory=list)


def _find_balanced_block(text: str, start: int) -> Optional[int]:
    """Index one past the brace closing the one at `start`, ignoring braces in strings"""
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def extract_payload(text: str) -> Dict[str, Any]:
    """Parse the first balanced {...} block of a response that is a JSON object

    Braces in surrounding prose (e.g. echoed SDL) are skipped over.

    Raises:
        PayloadParseError: No block, or no block is a valid JSON object
    """
    if not isinstance(text, str):
        raise PayloadParseError("Response is not text")

    start = text.find('{')
    if start == -1:
        raise PayloadParseError("Could not find JSON in LLM response")

    last_error: Optional[json.JSONDecodeError] = None
    while start != -1:
        end = _find_balanced_block(text, start)
        if end is not None:
            try:
                payload = json.loads(text[start:end])
            except json.JSONDecodeError as e:
                last_error = e
            else:
                if isinstance(payload, dict):
                    return payload
        start = text.find('{', start + 1)

    if last_error is not None:
        raise PayloadParseError("Invalid JSON in LLM response", last_error)
    raise PayloadParseError("Unbalanced JSON block in LLM response")


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _merge_resolver(resolver: ResolverInfo, insight: Dict[str, Any]) -> ResolverInfo:
    changes: Dict[str, Any] = {}

    if resolver.source_kind == SourceKind.UNKNOWN:
        inferred = insight.get('inferred_source_type')
        try:
            source_kind = SourceKind(inferred) if inferred else SourceKind.UNKNOWN
        except ValueError:
            logger.debug(f"Ignoring unsupported source type for {resolver.path}: {inferred!r}")
            source_kind = SourceKind.UNKNOWN

        if source_kind != SourceKind.UNKNOWN:
            details = insight.get('inferred_details')
            details = details if isinstance(details, dict) else {}
            changes['source_kind'] = source_kind
            if source_kind == SourceKind.DATABASE:
                changes['database_detail'] = DatabaseDetail.from_dict(details)
            elif source_kind == SourceKind.API:
                changes['api_detail'] = ApiDetail.from_dict(details)

    suggested = [d for d in _as_list(insight.get('dependencies')) if isinstance(d, str) and d]
    if suggested:
        dependencies = list(resolver.dependencies)
        for dependency in suggested:
            if dependency not in dependencies:
                dependencies.append(dependency)
        changes['dependencies'] = dependencies

    if not changes:
        return resolver
    return dataclasses.replace(resolver, **changes)


def _parse_connections(entries: List[Any]) -> List[Connection]:
    connections = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.debug(f"Dropping malformed connection: {entry!r}")
            continue
        try:
            connections.append(Connection.from_dict(entry))
        except ValueError as e:
            logger.debug(f"Dropping connection: {e}")
    return connections


def merge_enrichment(resolvers: List[ResolverInfo], response_text: str) -> EnrichmentResult:
    """Merge an enrichment response into the static resolver list

    A malformed response leaves the resolvers exactly as they were and
    reports applied=False with no connections.
    """
    try:
        payload = extract_payload(response_text)
    except PayloadParseError as e:
        logger.warning(f"Discarding enrichment response: {e}")
        return EnrichmentResult(resolvers=list(resolvers))

    insights: Dict[str, Dict[str, Any]] = {}
    for insight in _as_list(payload.get('resolverInsights')):
        if isinstance(insight, dict) and isinstance(insight.get('path'), str):
            insights[insight['path']] = insight

    merged = []
    for resolver in resolvers:
        insight = insights.get(resolver.path)
        merged.append(_merge_resolver(resolver, insight) if insight else resolver)

    connections = _parse_connections(_as_list(payload.get('connections')))
    patterns = [p for p in _as_list(payload.get('architecturePatterns')) if isinstance(p, str)]

    upgraded = sum(1 for before, after in zip(resolvers, merged)
                   if before.source_kind != after.source_kind)
    logger.info(f"Enrichment upgraded {upgraded} resolvers, supplied {len(connections)} connections")

    return EnrichmentResult(
        resolvers=merged,
        connections=connections,
        applied=True,
        architecture_patterns=patterns,
    )
