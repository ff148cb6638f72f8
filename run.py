"""
cppdoc Entry Point - build documentation from the configuration in the working directory
Run with: python run.py [-f config.json] [-D name=value]
"""

import sys

from cppdoc.cli import main

if __name__ == '__main__':
    sys.exit(main())
