"""
Command Line Interface for GQLAtlas
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

from .config import (
    AnalyzerConfig,
    DEFAULT_CONFIG_NAME,
    DEFAULT_OUTPUT,
    load_config,
    parse_llm_config,
    write_config,
)
from .exceptions import GQLAtlasError
from .llm.client import SUPPORTED_PROVIDERS
from .pipeline import run_analysis
from .reporters import get_reporter, JSONReporter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    common.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode with detailed logging'
    )

    parser = argparse.ArgumentParser(
        prog='gqlatlas',
        description='GQLAtlas - Map how a GraphQL service connects schema, resolvers and data sources',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s init --schema schema.graphql --resolvers src/resolvers
  %(prog)s analyze                                  # Use gqlatlas.yml
  %(prog)s analyze -s schema.graphql -r src -f json -o graph.json
  %(prog)s analyze --provider anthropic             # Enrich with an LLM
        """
    )
    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    init_parser = subparsers.add_parser(
        'init',
        parents=[common],
        help='Write a configuration file'
    )
    init_parser.add_argument('-s', '--schema', help='Path to the GraphQL schema file')
    init_parser.add_argument(
        '-r', '--resolvers',
        nargs='+',
        help='Resolver files or directories'
    )
    init_parser.add_argument(
        '--provider',
        choices=SUPPORTED_PROVIDERS,
        default='none',
        help='LLM provider for enrichment (default: none)'
    )
    init_parser.add_argument('--project-name', help='Project name (default: current directory name)')
    init_parser.add_argument(
        '-o', '--output',
        default=DEFAULT_OUTPUT,
        help=f'Graph output file (default: {DEFAULT_OUTPUT})'
    )
    init_parser.add_argument(
        '-c', '--config',
        default=DEFAULT_CONFIG_NAME,
        help=f'Configuration file to write (default: {DEFAULT_CONFIG_NAME})'
    )
    init_parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite an existing configuration file'
    )

    analyze_parser = subparsers.add_parser(
        'analyze',
        parents=[common],
        help='Analyze a GraphQL service'
    )

    input_group = analyze_parser.add_argument_group('Input Options')
    input_group.add_argument(
        '-c', '--config',
        help=f'Configuration file (default: {DEFAULT_CONFIG_NAME} if present)'
    )
    input_group.add_argument('-s', '--schema', help='Schema file or inline SDL (overrides config)')
    input_group.add_argument(
        '-r', '--resolvers',
        nargs='+',
        help='Resolver files or directories (overrides config)'
    )
    input_group.add_argument(
        '--provider',
        choices=SUPPORTED_PROVIDERS,
        help='LLM provider (overrides config)'
    )

    output_group = analyze_parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-o', '--output',
        help='Output file path (default: config output, else stdout)'
    )
    output_group.add_argument(
        '-f', '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format (default: console)'
    )
    output_group.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    return parser.parse_args(args)


def run_init(args: argparse.Namespace) -> int:
    """Write a new configuration file"""
    config_path = Path(args.config)
    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    config = AnalyzerConfig(
        schema=args.schema or 'schema.graphql',
        resolvers=args.resolvers or ['src/resolvers'],
        project_name=args.project_name or Path.cwd().name,
        output=args.output,
        llm=parse_llm_config({'provider': args.provider}),
    )
    write_config(config, config_path)

    print(f"Configuration created: {config_path}")
    if config.llm.enabled:
        print("Set the provider API key in the environment before running analyze.")
    print("You can now run: gqlatlas analyze")
    return 0


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Configuration file values, overridden by command line flags"""
    if args.config:
        config = load_config(args.config)
    elif Path(DEFAULT_CONFIG_NAME).is_file():
        config = load_config(DEFAULT_CONFIG_NAME)
    else:
        config = AnalyzerConfig()

    if args.schema:
        config.schema = args.schema
    if args.resolvers:
        config.resolvers = list(args.resolvers)
    if args.output:
        config.output = args.output
    if args.provider and args.provider != config.llm.provider:
        config.llm = parse_llm_config({
            'provider': args.provider,
            'endpoint': config.llm.endpoint,
            'timeout': config.llm.timeout,
        })
    return config


def run_analyze(args: argparse.Namespace) -> int:
    """Run the analysis and report it"""
    config = build_config(args)
    if not config.schema:
        print("Error: No schema given. Use --schema or run 'gqlatlas init'.", file=sys.stderr)
        return 1

    result = run_analysis(config)

    if args.format == 'console':
        reporter = get_reporter('console', use_colors=not args.no_color, verbose=args.verbose)
        reporter.report(result)
        if config.output:
            JSONReporter().report(result, config.output)
            print(f"Graph written to {config.output}")
    else:
        get_reporter('json').report(result, config.output)

    if result.errors:
        return 2
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parsed_args = parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        if parsed_args.command == 'init':
            return run_init(parsed_args)
        return run_analyze(parsed_args)
    except KeyboardInterrupt:
        print("\nAnalysis interrupted by user", file=sys.stderr)
        return 130
    except GQLAtlasError as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
