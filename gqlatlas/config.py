"""
Configuration - loads and writes the gqlatlas.yml project file
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions import FileAccessError, ParseError
from .llm.client import LLMConfig, SUPPORTED_PROVIDERS

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_NAME = "gqlatlas.yml"
DEFAULT_OUTPUT = "gqlatlas-graph.json"


@dataclass
class AnalyzerConfig:
    """Settings for one analysis run"""
    schema: Optional[str] = None
    resolvers: List[str] = field(default_factory=list)
    project_name: Optional[str] = None
    output: Optional[str] = None
    llm: LLMConfig = field(default_factory=LLMConfig)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.project_name:
            result['project_name'] = self.project_name
        result['schema'] = self.schema
        result['resolvers'] = list(self.resolvers)
        if self.output:
            result['output'] = self.output
        result['llm'] = self.llm.to_dict()
        return result


def _get(data: Dict[str, Any], *keys: str) -> Any:
    """First present key; camelCase spellings are accepted alongside snake_case"""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _resolve_path(value: Optional[str], base_dir: Path) -> Optional[str]:
    if not value:
        return value
    path = Path(value).expanduser()
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


def parse_llm_config(data: Optional[Dict[str, Any]]) -> LLMConfig:
    """Build an LLMConfig, falling back to provider "none" on unknown values"""
    data = data or {}
    provider = str(data.get('provider') or 'none').lower()
    if provider not in SUPPORTED_PROVIDERS:
        logger.warning(f"Unknown LLM provider '{provider}', enrichment disabled")
        provider = 'none'

    kwargs: Dict[str, Any] = {
        'provider': provider,
        'api_key': _get(data, 'api_key', 'apiKey') or None,
        'model': data.get('model') or None,
        'endpoint': data.get('endpoint') or None,
    }
    numeric = (
        ('timeout', ('timeout',), float),
        ('max_tokens', ('max_tokens', 'maxTokens'), int),
        ('temperature', ('temperature',), float),
    )
    for name, keys, convert in numeric:
        value = _get(data, *keys)
        if value is None:
            continue
        try:
            kwargs[name] = convert(value)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid llm.{name} value {value!r}", e) from e
    return LLMConfig(**kwargs)


def config_from_dict(data: Dict[str, Any], base_dir: Optional[Path] = None) -> AnalyzerConfig:
    """Build an AnalyzerConfig; relative paths are resolved against base_dir"""
    base_dir = base_dir or Path.cwd()

    resolvers = data.get('resolvers') or []
    if isinstance(resolvers, str):
        resolvers = [resolvers]

    return AnalyzerConfig(
        schema=_resolve_path(data.get('schema'), base_dir),
        resolvers=[_resolve_path(str(r), base_dir) for r in resolvers],
        project_name=_get(data, 'project_name', 'projectName'),
        output=_resolve_path(data.get('output'), base_dir),
        llm=parse_llm_config(data.get('llm')),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> AnalyzerConfig:
    """
    Load a YAML (or JSON) configuration file.

    Raises:
        FileAccessError: If the file does not exist
        ParseError: If the file is not valid YAML or not a mapping
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_NAME)
    if not config_path.is_file():
        raise FileAccessError(str(config_path), "config file not found")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid config file {config_path}", e) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(f"Config file {config_path} must contain a mapping")

    config = config_from_dict(data, config_path.resolve().parent)
    logger.info(f"Loaded configuration from {config_path}")
    return config


def write_config(config: AnalyzerConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """Write a configuration file; API keys are left to the environment"""
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_NAME)
    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.info(f"Configuration written to {config_path}")
    return config_path
