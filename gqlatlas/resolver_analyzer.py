"""
Resolver Analyzer - discovers resolver implementations and classifies them
"""

from __future__ import annotations

import inspect
import os
from pathlib import Path
from typing import List, Optional, Set
import logging

from graphql import GraphQLSchema, is_object_type

from .ast_analyzer import EXTENSION_DIALECTS, get_ast_analyzer
from .classifier import classify_resolver
from .exceptions import FileAccessError
from .models import ResolverInfo

logger = logging.getLogger(__name__)


class ResolverAnalyzer:
    """Scans resolver source files and classifies each detected resolver"""

    # Source file extensions to scan
    DEFAULT_EXTENSIONS = set(EXTENSION_DIALECTS)

    # Directories to skip
    SKIP_DIRS = {
        '.git', '.svn', '.hg', 'node_modules', '__pycache__',
        '.idea', '.vscode', 'build', 'dist', 'out', 'coverage',
        '.next', '.turbo', '.cache',
    }

    # Maximum file size to scan (5 MB)
    MAX_FILE_SIZE = 5 * 1024 * 1024

    def __init__(self, extensions: Optional[Set[str]] = None):
        self.resolver_files: List[Path] = []
        self.errors: List[str] = []
        self._extensions: Set[str] = set(extensions) if extensions else self.DEFAULT_EXTENSIONS.copy()

    def load_resolver_files(self, resolver_paths: List[str]) -> List[Path]:
        """Expand files and directories into the list of source files to scan"""
        self.resolver_files = []
        self.errors = []

        for resolver_path in resolver_paths:
            target = Path(resolver_path)
            if not target.exists():
                self._record_error(FileAccessError(str(target)))
                continue

            if target.is_dir():
                self.resolver_files.extend(self._collect_files(target))
            elif self._should_scan_file(target):
                self.resolver_files.append(target)
            else:
                logger.debug(f"Skipping unsupported file: {target}")

        logger.info(f"Found {len(self.resolver_files)} resolver source files")
        return self.resolver_files

    def _collect_files(self, directory: Path) -> List[Path]:
        """Recursively collect source files, in sorted order"""
        files = []
        for root, dirs, filenames in os.walk(directory):
            dirs[:] = sorted(d for d in dirs if d not in self.SKIP_DIRS)
            root_path = Path(root)
            for filename in sorted(filenames):
                filepath = root_path / filename
                if self._should_scan_file(filepath):
                    files.append(filepath)
        return files

    def _should_scan_file(self, filepath: Path) -> bool:
        if filepath.suffix.lower() not in self._extensions:
            return False
        if filepath.name.endswith('.d.ts'):
            return False
        try:
            if filepath.stat().st_size > self.MAX_FILE_SIZE:
                logger.debug(f"Skipping large file: {filepath}")
                return False
        except OSError:
            return False
        return True

    def analyze_resolvers(self) -> List[ResolverInfo]:
        """Analyze every loaded file; a failing file contributes nothing"""
        results: List[ResolverInfo] = []

        for resolver_file in self.resolver_files:
            try:
                content = self._read_file(resolver_file)
                results.extend(self.analyze_file_content(content, resolver_file))
            except FileAccessError as e:
                self._record_error(e)
            except Exception as e:
                logger.error(f"Error analyzing resolver file {resolver_file}: {e}")
                self.errors.append(f"{resolver_file}: {e}")

        logger.info(f"Classified {len(results)} resolvers from {len(self.resolver_files)} files")
        return results

    def analyze_file_content(self, content: str, filepath: Path) -> List[ResolverInfo]:
        """Detect and classify resolvers in one source file"""
        analyzer = get_ast_analyzer(filepath)
        if analyzer is None:
            return []

        return [
            classify_resolver(
                candidate.path,
                candidate.text,
                file_path=str(filepath),
                line_number=candidate.line_number,
            )
            for candidate in analyzer.find_resolver_candidates(content)
        ]

    def analyze_resolvers_from_schema(self, schema: GraphQLSchema) -> List[ResolverInfo]:
        """Classify resolver callables attached to an executable schema"""
        resolver_infos = []

        for type_name, graphql_type in schema.type_map.items():
            if type_name.startswith('__') or not is_object_type(graphql_type):
                continue

            for field_name, graphql_field in graphql_type.fields.items():
                resolver = graphql_field.resolve
                if resolver is None:
                    continue
                resolver_infos.append(classify_resolver(
                    f"{type_name}.{field_name}",
                    self._resolver_source(resolver),
                ))

        logger.info(f"Classified {len(resolver_infos)} resolvers attached to schema")
        return resolver_infos

    @staticmethod
    def _resolver_source(resolver) -> str:
        """Source text of a resolver callable, or its repr if unavailable"""
        try:
            return inspect.getsource(resolver)
        except (OSError, TypeError):
            return repr(resolver)

    def _read_file(self, filepath: Path) -> str:
        """Read file content with encoding fallback"""
        encodings = ['utf-8', 'latin-1']

        for encoding in encodings:
            try:
                with open(filepath, 'r', encoding=encoding) as f:
                    return f.read()
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise FileAccessError(str(filepath), e.strerror or str(e)) from e

        raise FileAccessError(str(filepath), "undecodable content")

    def _record_error(self, error: FileAccessError) -> None:
        logger.warning(f"Skipping resolver source {error}")
        self.errors.append(str(error))
