"""
AST Analyzer - Syntax-aware resolver discovery using tree-sitter
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Dict
from dataclasses import dataclass
import logging

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser, Node

logger = logging.getLogger(__name__)


FUNCTION_NODE_TYPES = {'arrow_function', 'function_expression', 'function', 'generator_function'}


@dataclass
class ResolverCandidate:
    """A function that looks like a resolver, before classification"""
    path: str
    text: str
    line_number: int
    kind: str  # map_entry, method, reference, standalone


class JavaScriptASTAnalyzer:
    """JavaScript/TypeScript resolver detector

    Two shapes are recognized:

    - Resolver maps: an object literal that is the value of an object
      property (type name = property key), or that initializes a variable
      whose name contains "resolver" (type name = variable name). Property
      values always qualify, whatever the key is called; variable
      initializers only qualify by name.
    - Standalone resolvers: a function bound to a name containing
      "resolver".

    Detection is heuristic. Maps wrapped in `as`/`satisfies`, built with
    spreads, or keyed by computed/string keys are missed.
    """

    def __init__(self, dialect: str = 'javascript'):
        self.dialect = dialect
        if dialect == 'typescript':
            self.language = Language(tree_sitter_typescript.language_typescript())
        elif dialect == 'tsx':
            self.language = Language(tree_sitter_typescript.language_tsx())
        else:
            self.language = Language(tree_sitter_javascript.language())
        self.parser = Parser(self.language)

    def parse(self, code: str):
        """Parse source into a tree-sitter tree"""
        return self.parser.parse(bytes(code, 'utf-8'))

    def find_resolver_candidates(self, code: str) -> List[ResolverCandidate]:
        """Walk the syntax tree and collect resolver candidates in source order"""
        tree = self.parse(code)
        code_bytes = bytes(code, 'utf-8')
        named_functions = self._index_named_functions(tree.root_node, code_bytes)
        candidates: List[ResolverCandidate] = []

        def walk(node: Node) -> None:
            if node.type == 'object':
                candidates.extend(self._analyze_object_literal(node, code_bytes, named_functions))
            elif node.type in FUNCTION_NODE_TYPES or node.type == 'function_declaration':
                candidate = self._analyze_function(node, code_bytes)
                if candidate:
                    candidates.append(candidate)

            for child in node.children:
                walk(child)

        walk(tree.root_node)
        return candidates

    def _index_named_functions(self, root: Node, code_bytes: bytes) -> Dict[str, str]:
        """Top-level function names -> source text, for `field: handlerName` entries"""
        functions: Dict[str, str] = {}

        def visit(node: Node) -> None:
            if node.type == 'function_declaration':
                name = node.child_by_field_name('name')
                if name is not None:
                    functions.setdefault(_text(name, code_bytes), _text(node, code_bytes))
            elif node.type == 'variable_declarator':
                name = node.child_by_field_name('name')
                value = node.child_by_field_name('value')
                if name is not None and value is not None and value.type in FUNCTION_NODE_TYPES:
                    functions.setdefault(_text(name, code_bytes), _text(value, code_bytes))
            for child in node.named_children:
                if child.type in ('lexical_declaration', 'variable_declaration',
                                  'export_statement', 'function_declaration',
                                  'variable_declarator'):
                    visit(child)

        for child in root.named_children:
            visit(child)
        return functions

    def _infer_map_name(self, node: Node, code_bytes: bytes) -> Optional[str]:
        """Return the type name if this object literal is a resolver map"""
        parent = node.parent
        if parent is None:
            return None

        if parent.type == 'pair':
            key = parent.child_by_field_name('key')
            value = parent.child_by_field_name('value')
            if key is not None and key.type == 'property_identifier' and value == node:
                return _text(key, code_bytes)
        elif parent.type == 'variable_declarator':
            name = parent.child_by_field_name('name')
            if name is not None and name.type == 'identifier':
                variable = _text(name, code_bytes)
                if 'resolver' in variable.lower():
                    return variable
        return None

    def _analyze_object_literal(self, node: Node, code_bytes: bytes,
                                named_functions: Dict[str, str]) -> List[ResolverCandidate]:
        type_name = self._infer_map_name(node, code_bytes)
        if type_name is None:
            return []

        candidates = []
        for member in node.named_children:
            if member.type == 'pair':
                key = member.child_by_field_name('key')
                value = member.child_by_field_name('value')
                if key is None or value is None or key.type != 'property_identifier':
                    continue
                field_name = _text(key, code_bytes)
                if value.type in FUNCTION_NODE_TYPES:
                    text, kind = _text(value, code_bytes), 'map_entry'
                elif value.type == 'identifier':
                    reference = _text(value, code_bytes)
                    text, kind = named_functions.get(reference, reference), 'reference'
                else:
                    continue
            elif member.type == 'method_definition':
                name = member.child_by_field_name('name')
                if name is None or name.type != 'property_identifier':
                    continue
                field_name = _text(name, code_bytes)
                text, kind = _text(member, code_bytes), 'method'
            else:
                continue

            candidates.append(ResolverCandidate(
                path=f"{type_name}.{field_name}",
                text=text,
                line_number=member.start_point[0] + 1,
                kind=kind,
            ))

        return candidates

    def _analyze_function(self, node: Node, code_bytes: bytes) -> Optional[ResolverCandidate]:
        """A function bound to a name containing "resolver" is a standalone resolver"""
        if node.type == 'function_declaration':
            name = node.child_by_field_name('name')
        else:
            parent = node.parent
            if parent is None or parent.type != 'variable_declarator':
                return None
            name = parent.child_by_field_name('name')

        if name is None or name.type != 'identifier':
            return None
        function_name = _text(name, code_bytes)
        if 'resolver' not in function_name.lower():
            return None

        return ResolverCandidate(
            path=function_name,
            text=_text(node, code_bytes),
            line_number=node.start_point[0] + 1,
            kind='standalone',
        )


def _text(node: Node, code_bytes: bytes) -> str:
    return code_bytes[node.start_byte:node.end_byte].decode('utf-8')


EXTENSION_DIALECTS = {
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.ts': 'typescript',
    '.mts': 'typescript',
    '.cts': 'typescript',
    '.tsx': 'tsx',
}


def get_ast_analyzer(filepath: Path) -> Optional[JavaScriptASTAnalyzer]:
    """Factory function to get the analyzer for a source file's dialect"""
    dialect = EXTENSION_DIALECTS.get(Path(filepath).suffix.lower())
    if dialect is None:
        return None
    return JavaScriptASTAnalyzer(dialect)
