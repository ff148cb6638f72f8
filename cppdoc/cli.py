"""
cppdoc command line entry point
"""

import argparse
import sys
from pathlib import Path

from .build.doc_builder import DocBuilder
from .doc_config import DEFAULT_CONFIG_FILENAME, DocConfig
from .errors import ConfigurationError
from . import logger

EXIT_OK = 0
EXIT_CONFIG = 78


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cppdoc',
        description='Build reference documentation from C++ sources.'
    )
    parser.add_argument('-f', '--config', action='append', default=[], metavar='FILE',
                        help='load configuration from FILE (may be given more than once)')
    parser.add_argument('-D', '--define', action='append', default=[], metavar='NAME=VALUE',
                        help='set a configuration property')
    parser.add_argument('-e', '--eclipse', action='store_true',
                        help='write an Eclipse help table of contents')
    parser.add_argument('-s', '--search-index', action='store_true',
                        help='build a search index')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='show debug messages on the console')
    return parser


def load_config(args) -> DocConfig:
    config = DocConfig()
    default_file = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_file.exists():
        config.load_file(default_file)
    for config_file in args.config:
        config.load_file(config_file)
    for definition in args.define:
        config.define(definition)
    return config


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logger.set_verbose(args.verbose)

    try:
        config = load_config(args)
        builder = DocBuilder(config, eclipse_toc=args.eclipse, search_index=args.search_index)
        builder.run()
    except ConfigurationError as e:
        print(f"cppdoc: {e}", file=sys.stderr)
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
