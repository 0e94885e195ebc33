"""
Entry point for CLI module execution.
Allows running: python -m promptdesk.cli <command>
"""
import sys

from promptdesk.cli.manage import main

if __name__ == '__main__':
    sys.exit(main())
