"""
Entry point for running SwiftKit CLI as a module.

Usage: python -m swiftkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
