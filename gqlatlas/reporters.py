"""
Report generators for analysis results
"""

import json
from typing import Optional
import sys

from .models import AnalysisResult, ConnectionKind, NodeKind, SourceKind


class BaseReporter:
    """Base class for reporters"""

    def report(self, result: AnalysisResult, output: Optional[str] = None) -> str:
        """Generate report and optionally write to file"""
        raise NotImplementedError

    def _write_output(self, content: str, output: Optional[str]) -> None:
        """Write content to file or stdout"""
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(content)
        else:
            print(content)


class ConsoleReporter(BaseReporter):
    """Console/terminal summary reporter with colors"""

    # ANSI color codes
    COLORS = {
        'database': '\033[94m',  # Blue
        'api': '\033[95m',       # Magenta
        'computed': '\033[96m',  # Cyan
        'unknown': '\033[93m',   # Yellow
        'error': '\033[91m',     # Red
        'reset': '\033[0m',
        'bold': '\033[1m',
        'green': '\033[92m',
    }

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        self.use_colors = use_colors and sys.stdout.isatty()
        self.verbose = verbose

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors enabled"""
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def report(self, result: AnalysisResult, output: Optional[str] = None) -> str:
        """Generate console summary"""
        lines = []
        summary = result.summary

        # Header
        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))
        lines.append(self._color("  GRAPHQL SERVICE ANALYSIS", 'bold'))
        lines.append(self._color("=" * 60, 'bold'))
        lines.append("")
        lines.append(f"Mode: {result.mode}")
        lines.append("")

        lines.append(self._color(f"SCHEMA NODES ({len(result.schema)} total):", 'bold'))
        for kind in NodeKind:
            count = summary['nodes'][kind.value]
            if count > 0:
                lines.append(f"  {kind.value}: {count}")
        lines.append("")

        lines.append(self._color(f"RESOLVERS ({len(result.resolvers)} total):", 'bold'))
        for kind in SourceKind:
            count = summary['resolvers'][kind.value]
            if count > 0:
                lines.append(f"  {self._color(kind.value, kind.value)}: {count}")
        lines.append("")

        lines.append(self._color(f"CONNECTIONS ({len(result.connections)} total):", 'bold'))
        for kind in ConnectionKind:
            count = summary['connections'][kind.value]
            if count > 0:
                lines.append(f"  {kind.value}: {count}")

        if self.verbose:
            lines.append("-" * 60)
            for connection in result.connections:
                lines.append(f"  {connection.source} --{connection.kind.value}--> {connection.target}")

        unknown = result.unknown_resolvers
        lines.append("")
        if not unknown:
            lines.append(self._color("All resolvers classified.", 'green'))
        else:
            lines.append(self._color(f"UNCLASSIFIED RESOLVERS ({len(unknown)}):", 'unknown'))
            for resolver in unknown:
                location = f" ({resolver.file_path}:{resolver.line_number})" if resolver.file_path else ""
                lines.append(f"  - {resolver.path}{location}")

        # Errors
        if result.errors:
            lines.append("")
            lines.append(self._color("ERRORS:", 'error'))
            for error in result.errors:
                lines.append(f"  - {error}")

        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))

        content = "\n".join(lines)
        self._write_output(content, output)
        return content


class JSONReporter(BaseReporter):
    """JSON graph writer; the output is the rendering data contract"""

    def report(self, result: AnalysisResult, output: Optional[str] = None) -> str:
        """Generate JSON report"""
        content = json.dumps(result.to_dict(), indent=2)
        self._write_output(content, output)
        return content


def get_reporter(format: str, **kwargs) -> BaseReporter:
    """Factory function to get reporter by format"""
    reporters = {
        'console': ConsoleReporter,
        'json': JSONReporter,
    }

    reporter_class = reporters.get(format.lower())
    if not reporter_class:
        raise ValueError(f"Unknown report format: {format}. Supported: {list(reporters.keys())}")

    return reporter_class(**kwargs)
