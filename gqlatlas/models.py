"""
Data models for GQLAtlas.

This module defines the structures handed between the analysis stages:

- NodeKind/SourceKind/ConnectionKind: Enums for classification
- SchemaNode/SchemaField: Schema declarations after introspection
- ResolverInfo/DatabaseDetail/ApiDetail: Classified resolver implementations
- Connection: One typed edge of the connection graph
- AnalysisResult: Complete analysis output

Every model converts to plain JSON-serializable data through to_dict(),
which is the only contract with rendering collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Iterator


BUILTIN_SCALARS = frozenset({'ID', 'String', 'Int', 'Float', 'Boolean'})

DATABASE_ENGINES = ('prisma', 'mongoose', 'sequelize', 'typeorm', 'raw-sql', 'other')
DATABASE_OPERATIONS = ('findMany', 'findUnique', 'create', 'update', 'delete', 'other')
API_PROTOCOLS = ('rest', 'graphql', 'grpc', 'other')


class NodeKind(Enum):
    QUERY = "Query"
    MUTATION = "Mutation"
    OBJECT_TYPE = "ObjectType"
    INTERFACE = "Interface"
    UNION = "Union"
    ENUM = "Enum"
    INPUT_TYPE = "InputType"

    @property
    def has_fields(self) -> bool:
        return self in (NodeKind.QUERY, NodeKind.MUTATION,
                        NodeKind.OBJECT_TYPE, NodeKind.INTERFACE)


class SourceKind(Enum):
    DATABASE = "database"
    API = "api"
    COMPUTED = "computed"
    UNKNOWN = "unknown"


class ConnectionKind(Enum):
    RESOLVES = "resolves"
    CALLS = "calls"
    REFERENCES = "references"


@dataclass
class SchemaField:
    """One field of a schema type, wrappers stripped"""
    name: str
    declared_type: str
    is_non_null: bool = False
    is_list: bool = False
    description: Optional[str] = None

    def __post_init__(self):
        if any(c in self.declared_type for c in '[]!'):
            raise ValueError(f"declared_type must be unwrapped: {self.declared_type!r}")

    @property
    def is_builtin_scalar(self) -> bool:
        return self.declared_type in BUILTIN_SCALARS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.declared_type,
            'isNonNull': self.is_non_null,
            'isList': self.is_list,
            'description': self.description,
        }


@dataclass
class SchemaNode:
    """A schema-level type declaration"""
    kind: NodeKind
    name: str
    fields: Optional[List[SchemaField]] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'type': self.kind.value,
            'name': self.name,
            'description': self.description,
        }
        if self.fields is not None:
            result['fields'] = [f.to_dict() for f in self.fields]
        return result


def _text(value: Any) -> Optional[str]:
    """Non-empty strings only; anything else from external data becomes None"""
    return value if isinstance(value, str) and value else None


@dataclass
class DatabaseDetail:
    """How a database-backed resolver reaches its store"""
    engine: str
    model: Optional[str] = None
    operation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.engine, 'model': self.model, 'operation': self.operation}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DatabaseDetail:
        return cls(
            engine=_text(data.get('type')) or _text(data.get('engine')) or 'other',
            model=_text(data.get('model')),
            operation=_text(data.get('operation')),
        )


@dataclass
class ApiDetail:
    """How an API-backed resolver reaches its upstream"""
    protocol: str
    endpoint: Optional[str] = None
    method: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.protocol, 'endpoint': self.endpoint, 'method': self.method}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ApiDetail:
        return cls(
            protocol=_text(data.get('type')) or _text(data.get('protocol')) or 'other',
            endpoint=_text(data.get('endpoint')),
            method=_text(data.get('method')),
        )


@dataclass
class ResolverInfo:
    """A detected resolver implementation and its inferred data source"""
    path: str
    source_kind: SourceKind = SourceKind.UNKNOWN
    database_detail: Optional[DatabaseDetail] = None
    api_detail: Optional[ApiDetail] = None
    dependencies: List[str] = field(default_factory=list)
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    code: str = ""

    def __post_init__(self):
        if self.database_detail is not None and self.api_detail is not None:
            raise ValueError(f"{self.path}: database and api detail are mutually exclusive")
        if (self.database_detail is not None) != (self.source_kind == SourceKind.DATABASE):
            raise ValueError(f"{self.path}: database detail present iff source kind is database")
        if (self.api_detail is not None) != (self.source_kind == SourceKind.API):
            raise ValueError(f"{self.path}: api detail present iff source kind is api")

    @property
    def type_name(self) -> str:
        """Declaring type: the part of the path before the first dot"""
        return self.path.split('.', 1)[0]

    @property
    def field_name(self) -> Optional[str]:
        if '.' not in self.path:
            return None
        return self.path.split('.', 1)[1]

    @property
    def is_known(self) -> bool:
        return self.source_kind != SourceKind.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'path': self.path,
            'sourceType': self.source_kind.value,
            'dependencies': list(self.dependencies),
        }
        if self.database_detail:
            result['databaseInfo'] = self.database_detail.to_dict()
        if self.api_detail:
            result['apiInfo'] = self.api_detail.to_dict()
        if self.file_path:
            result['file'] = self.file_path
            result['line'] = self.line_number
        return result


@dataclass
class Connection:
    """A directed, typed edge of the connection graph"""
    source: str
    target: str
    kind: ConnectionKind
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'from': self.source,
            'to': self.target,
            'type': self.kind.value,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Connection:
        """Build from the external {from, to, type} shape; raises ValueError if malformed"""
        source = data.get('from')
        target = data.get('to')
        if not isinstance(source, str) or not isinstance(target, str) or not source or not target:
            raise ValueError(f"connection needs string 'from' and 'to': {data!r}")
        return cls(
            source=source,
            target=target,
            kind=ConnectionKind(data.get('type')),
            description=str(data.get('description') or ''),
        )


@dataclass
class AnalysisResult:
    """Result of one analysis run"""
    schema: List[SchemaNode] = field(default_factory=list)
    resolvers: List[ResolverInfo] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    mode: str = "static"
    errors: List[str] = field(default_factory=list)

    @property
    def unknown_resolvers(self) -> List[ResolverInfo]:
        """Resolvers no rule could classify, reported as a quality signal"""
        return [r for r in self.resolvers if r.source_kind == SourceKind.UNKNOWN]

    @property
    def summary(self) -> Dict[str, Dict[str, int]]:
        """Counts by node kind, source kind and edge kind"""
        nodes = {k.value: 0 for k in NodeKind}
        for node in self.schema:
            nodes[node.kind.value] += 1
        sources = {k.value: 0 for k in SourceKind}
        for resolver in self.resolvers:
            sources[resolver.source_kind.value] += 1
        edges = {k.value: 0 for k in ConnectionKind}
        for connection in self.connections:
            edges[connection.kind.value] += 1
        return {'nodes': nodes, 'resolvers': sources, 'connections': edges}

    def get_connections_by_kind(self, kind: ConnectionKind) -> List[Connection]:
        return [c for c in self.connections if c.kind == kind]

    def get_resolver(self, path: str) -> Optional[ResolverInfo]:
        for resolver in self.resolvers:
            if resolver.path == path:
                return resolver
        return None

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.connections)

    def __len__(self) -> int:
        return len(self.connections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schema': [n.to_dict() for n in self.schema],
            'resolvers': [r.to_dict() for r in self.resolvers],
            'connections': [c.to_dict() for c in self.connections],
            'mode': self.mode,
            'errors': self.errors,
            'summary': self.summary,
        }
