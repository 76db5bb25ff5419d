"""
Entry point for running SwiftKit CLI as a module.

Usage: python -m swiftkit [command] [options]
"""

from swiftkit.cli.parser import main

if __name__ == "__main__":
    main()
