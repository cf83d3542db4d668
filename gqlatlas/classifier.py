"""
Resolver classifier - infers a resolver's data source from its source text.

Classification is an ordered list of rules. Each rule pairs a detector
pattern with an extractor that builds the classification; the first rule
whose detector matches wins, so database rules always shadow API rules and
both shadow the computed fallback.

Example:
    result = classify_source("return prisma.user.findMany()")
    result.source_kind      # SourceKind.DATABASE
    result.database_detail  # DatabaseDetail('prisma', 'user', 'findMany')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Tuple
import logging

from .models import ResolverInfo, SourceKind, DatabaseDetail, ApiDetail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one piece of resolver text"""
    source_kind: SourceKind = SourceKind.UNKNOWN
    database_detail: Optional[DatabaseDetail] = None
    api_detail: Optional[ApiDetail] = None
    rule: Optional[str] = None


UNCLASSIFIED = Classification()


@dataclass(frozen=True)
class ClassificationRule:
    """One detector/extractor pair in the precedence list"""
    name: str
    source_kind: SourceKind
    detector: Pattern
    extractor: Callable[[str], Classification]

    def matches(self, text: str) -> bool:
        return self.detector.search(text) is not None

    def apply(self, text: str) -> Optional[Classification]:
        if not self.matches(text):
            return None
        return self.extractor(text)


# Database signatures
PRISMA_CALL = re.compile(r'prisma\.\w+\.\w+')
PRISMA_MODEL = re.compile(r'prisma\.(\w+)')
MONGOOSE_CALL = re.compile(r'\w+\.find\(|\w+\.findById\(|\w+\.findOne\(|\w+\.create\(')
TYPEORM_CALL = re.compile(r'repository\.\w+\(|getRepository\(')
RAW_SQL = re.compile(r'\b(?:SELECT|INSERT|UPDATE|DELETE)\b|\bFROM\s+\w+', re.IGNORECASE)

# API signatures
REST_CALL = re.compile(r'fetch\(|axios\.|\.get\(|\.post\(|\.put\(|\.delete\(|request\(')
REST_ENDPOINT = re.compile(r'\.(?:get|post|put|delete|patch)\(\s*([\'"`])([^\'"`]+)\1')
GRAPHQL_CALL = re.compile(r'graphql\(|\bgql\s*`')

# Computed: a return of an identifier combined with an operator or member access
COMPUTED_RETURN = re.compile(r'return\s+\w+\s*(?:[-+*/?]|\.\w+)')

RESOLVER_REFERENCE = re.compile(r'(\w+)\.resolvers\.(\w+)')

# Checked in order; snake_case spellings come from Python clients
PRISMA_OPERATIONS: List[Tuple[str, Tuple[str, ...]]] = [
    ('findMany', ('.findMany', '.find_many')),
    ('findUnique', ('.findUnique', '.findFirst', '.find_unique', '.find_first')),
    ('create', ('.create',)),
    ('update', ('.update',)),
    ('delete', ('.delete',)),
]

REST_METHODS = [
    ('.get(', 'GET'),
    ('.post(', 'POST'),
    ('.put(', 'PUT'),
    ('.delete(', 'DELETE'),
    ('.patch(', 'PATCH'),
]


def detect_prisma_model(text: str) -> Optional[str]:
    match = PRISMA_MODEL.search(text)
    return match.group(1) if match else None


def detect_prisma_operation(text: str) -> str:
    for operation, markers in PRISMA_OPERATIONS:
        if any(marker in text for marker in markers):
            return operation
    return 'other'


def detect_rest_method(text: str) -> Optional[str]:
    for marker, method in REST_METHODS:
        if marker in text:
            return method
    return None


def detect_rest_endpoint(text: str) -> Optional[str]:
    """Literal string passed straight to a method-style HTTP call"""
    match = REST_ENDPOINT.search(text)
    return match.group(2) if match else None


def _database(engine: str) -> Callable[[str], Classification]:
    def extract(text: str) -> Classification:
        return Classification(SourceKind.DATABASE, database_detail=DatabaseDetail(engine), rule=engine)
    return extract


def _extract_prisma(text: str) -> Classification:
    return Classification(
        SourceKind.DATABASE,
        database_detail=DatabaseDetail(
            engine='prisma',
            model=detect_prisma_model(text),
            operation=detect_prisma_operation(text),
        ),
        rule='prisma',
    )


def _extract_rest(text: str) -> Classification:
    return Classification(
        SourceKind.API,
        api_detail=ApiDetail(
            protocol='rest',
            endpoint=detect_rest_endpoint(text),
            method=detect_rest_method(text),
        ),
        rule='rest',
    )


def _extract_graphql(text: str) -> Classification:
    return Classification(SourceKind.API, api_detail=ApiDetail(protocol='graphql'), rule='graphql')


def _extract_computed(text: str) -> Classification:
    return Classification(SourceKind.COMPUTED, rule='computed')


CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule('prisma', SourceKind.DATABASE, PRISMA_CALL, _extract_prisma),
    ClassificationRule('mongoose', SourceKind.DATABASE, MONGOOSE_CALL, _database('mongoose')),
    ClassificationRule('typeorm', SourceKind.DATABASE, TYPEORM_CALL, _database('typeorm')),
    ClassificationRule('raw-sql', SourceKind.DATABASE, RAW_SQL, _database('raw-sql')),
    ClassificationRule('rest', SourceKind.API, REST_CALL, _extract_rest),
    ClassificationRule('graphql', SourceKind.API, GRAPHQL_CALL, _extract_graphql),
    ClassificationRule('computed', SourceKind.COMPUTED, COMPUTED_RETURN, _extract_computed),
]


def classify_source(text: str, rules: Optional[List[ClassificationRule]] = None) -> Classification:
    """Classify resolver text; the first matching rule wins"""
    for rule in rules if rules is not None else CLASSIFICATION_RULES:
        result = rule.apply(text)
        if result is not None:
            return result
    return UNCLASSIFIED


def detect_dependencies(text: str) -> List[str]:
    """`<a>.resolvers.<b>` references as "a.b", first occurrence order"""
    dependencies: List[str] = []
    for match in RESOLVER_REFERENCE.finditer(text):
        dependency = f"{match.group(1)}.{match.group(2)}"
        if dependency not in dependencies:
            dependencies.append(dependency)
    return dependencies


def classify_resolver(path: str, text: str, file_path: Optional[str] = None,
                      line_number: Optional[int] = None) -> ResolverInfo:
    """Build a ResolverInfo for one candidate"""
    classification = classify_source(text)
    logger.debug(f"{path}: {classification.source_kind.value} ({classification.rule or 'no rule'})")
    return ResolverInfo(
        path=path,
        source_kind=classification.source_kind,
        database_detail=classification.database_detail,
        api_detail=classification.api_detail,
        dependencies=detect_dependencies(text),
        file_path=file_path,
        line_number=line_number,
        code=text,
    )
