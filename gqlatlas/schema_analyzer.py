"""
Schema Analyzer - Turns a GraphQL subgraph schema into typed schema nodes
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional, Set, Tuple

from graphql import (
    GraphQLError,
    GraphQLSchema,
    build_ast_schema,
    introspection_from_schema,
    parse,
)
from graphql.language import (
    DirectiveDefinitionNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    TypeDefinitionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from .exceptions import NotLoadedError, SchemaParseError
from .models import SchemaNode, SchemaField, NodeKind, BUILTIN_SCALARS

logger = logging.getLogger(__name__)


# Federation directives a subgraph may use without declaring them
FEDERATION_PRELUDE = """
scalar _Any
scalar _FieldSet
scalar FieldSet
scalar link__Import

directive @key(fields: _FieldSet!, resolvable: Boolean = true) repeatable on OBJECT | INTERFACE
directive @requires(fields: _FieldSet!) on FIELD_DEFINITION
directive @provides(fields: _FieldSet!) on FIELD_DEFINITION
directive @external(reason: String) on OBJECT | FIELD_DEFINITION
directive @extends on OBJECT | INTERFACE
directive @shareable repeatable on OBJECT | FIELD_DEFINITION
directive @interfaceObject on OBJECT
directive @override(from: String!, label: String) on FIELD_DEFINITION
directive @composeDirective(name: String!) repeatable on SCHEMA
directive @link(url: String!, as: String, import: [link__Import]) repeatable on SCHEMA
directive @inaccessible on FIELD_DEFINITION | OBJECT | INTERFACE | UNION | ARGUMENT_DEFINITION | SCALAR | ENUM | ENUM_VALUE | INPUT_OBJECT | INPUT_FIELD_DEFINITION
directive @tag(name: String!) repeatable on FIELD_DEFINITION | OBJECT | INTERFACE | UNION | ARGUMENT_DEFINITION | SCALAR | ENUM | ENUM_VALUE | INPUT_OBJECT | INPUT_FIELD_DEFINITION
"""

INTERNAL_PREFIX = "__"

# Extension node -> definition node it becomes when the type is not defined locally
_PROMOTIONS = {
    ObjectTypeExtensionNode: ObjectTypeDefinitionNode,
    InterfaceTypeExtensionNode: InterfaceTypeDefinitionNode,
    UnionTypeExtensionNode: UnionTypeDefinitionNode,
    EnumTypeExtensionNode: EnumTypeDefinitionNode,
    InputObjectTypeExtensionNode: InputObjectTypeDefinitionNode,
    ScalarTypeExtensionNode: ScalarTypeDefinitionNode,
}

# Introspection kind -> node kind; OBJECT is refined by name
_KIND_MAP = {
    'INTERFACE': NodeKind.INTERFACE,
    'UNION': NodeKind.UNION,
    'ENUM': NodeKind.ENUM,
    'INPUT_OBJECT': NodeKind.INPUT_TYPE,
}


class SchemaAnalyzer:
    """Loads a subgraph schema and projects it into SchemaNode values"""

    def __init__(self):
        self.schema: Optional[GraphQLSchema] = None
        self._prelude_types: Set[str] = set()

    @property
    def is_loaded(self) -> bool:
        return self.schema is not None

    def load_schema(self, source: str) -> GraphQLSchema:
        """Load a schema from a file path or an inline SDL string

        Raises:
            SchemaParseError: If the SDL does not parse or validate
        """
        sdl = self._read_source(source)

        try:
            document = parse(sdl)
        except GraphQLError as e:
            logger.error(f"Failed to parse GraphQL schema: {e}")
            raise SchemaParseError("Failed to parse GraphQL schema", e) from e

        document, self._prelude_types = self._as_subgraph_document(document)

        try:
            self.schema = build_ast_schema(document)
        except (GraphQLError, TypeError) as e:
            # assert_valid_sdl reports validation failures as TypeError
            logger.error(f"Invalid GraphQL schema: {e}")
            raise SchemaParseError("Invalid GraphQL schema", e) from e

        logger.info(f"GraphQL schema loaded ({len(self.schema.type_map)} types)")
        return self.schema

    def _read_source(self, source: str) -> str:
        """Return file contents when source names a file, else source itself"""
        if '\n' not in source and '{' not in source:
            try:
                path = Path(source)
                if path.is_file():
                    return path.read_text(encoding='utf-8')
            except OSError as e:
                logger.debug(f"Treating schema source as inline SDL: {e}")
        return source

    def _as_subgraph_document(self, document: DocumentNode) -> Tuple[DocumentNode, Set[str]]:
        """Add missing federation definitions and promote orphan extensions"""
        defined_types = {d.name.value for d in document.definitions
                         if isinstance(d, TypeDefinitionNode)}
        defined_directives = {d.name.value for d in document.definitions
                              if isinstance(d, DirectiveDefinitionNode)}

        prelude = []
        prelude_types = set()
        for definition in parse(FEDERATION_PRELUDE).definitions:
            name = definition.name.value
            if isinstance(definition, DirectiveDefinitionNode):
                if name not in defined_directives:
                    prelude.append(definition)
            elif name not in defined_types:
                prelude.append(definition)
                prelude_types.add(name)

        definitions = []
        for definition in document.definitions:
            name_node = getattr(definition, 'name', None)
            if (type(definition) in _PROMOTIONS
                    and name_node.value not in defined_types):
                definition = self._promote_extension(definition)
                defined_types.add(name_node.value)
            definitions.append(definition)

        return DocumentNode(definitions=tuple(prelude + definitions)), prelude_types

    @staticmethod
    def _promote_extension(node):
        """`extend enum X` for an undefined X becomes `enum X`, and so on for each kind"""
        node_class = _PROMOTIONS[type(node)]
        attributes = {key: getattr(node, key, None) for key in node_class.keys
                      if key != 'description'}
        return node_class(description=None, **attributes)

    def analyze(self) -> List[SchemaNode]:
        """Extract schema nodes and their fields from the loaded schema"""
        if not self.schema:
            raise NotLoadedError()

        introspection = introspection_from_schema(self.schema)
        schema_nodes = []

        for type_info in introspection['__schema']['types']:
            name = type_info['name']
            if name.startswith(INTERNAL_PREFIX) or name in self._prelude_types:
                continue

            kind = self._determine_node_kind(type_info)
            if kind is None:
                continue  # scalars are not visualized

            node = SchemaNode(
                kind=kind,
                name=name,
                description=type_info.get('description') or None,
            )
            if kind.has_fields:
                node.fields = [self._build_field(f) for f in type_info.get('fields') or []]

            schema_nodes.append(node)

        logger.info(f"Extracted {len(schema_nodes)} schema nodes")
        return schema_nodes

    def _determine_node_kind(self, type_info: Dict[str, Any]) -> Optional[NodeKind]:
        kind = type_info['kind']
        if kind == 'OBJECT':
            name = type_info['name']
            if name == 'Query':
                return NodeKind.QUERY
            if name == 'Mutation':
                return NodeKind.MUTATION
            return NodeKind.OBJECT_TYPE
        return _KIND_MAP.get(kind)

    def _build_field(self, field_info: Dict[str, Any]) -> SchemaField:
        type_name, is_non_null, is_list = unwrap_type_ref(field_info['type'])
        return SchemaField(
            name=field_info['name'],
            declared_type=type_name,
            is_non_null=is_non_null,
            is_list=is_list,
            description=field_info.get('description') or None,
        )

    def find_type_dependencies(self) -> Dict[str, List[str]]:
        """Map every type to the non-builtin named types its fields use"""
        if not self.schema:
            raise NotLoadedError()

        dependencies: Dict[str, List[str]] = {}
        for type_name, graphql_type in self.schema.type_map.items():
            if type_name.startswith(INTERNAL_PREFIX) or type_name in self._prelude_types:
                continue

            deps: List[str] = []
            for graphql_field in getattr(graphql_type, 'fields', {}).values():
                named = graphql_field.type
                while hasattr(named, 'of_type'):
                    named = named.of_type
                if named.name not in BUILTIN_SCALARS and named.name not in deps:
                    deps.append(named.name)
            dependencies[type_name] = deps

        return dependencies


def unwrap_type_ref(type_ref: Dict[str, Any]) -> Tuple[str, bool, bool]:
    """Unwrap an introspection type reference outer-to-inner

    Returns:
        (named type, saw NON_NULL, saw LIST)
    """
    is_non_null = False
    is_list = False
    while type_ref['kind'] in ('NON_NULL', 'LIST'):
        if type_ref['kind'] == 'NON_NULL':
            is_non_null = True
        else:
            is_list = True
        type_ref = type_ref['ofType']
    return type_ref['name'], is_non_null, is_list
