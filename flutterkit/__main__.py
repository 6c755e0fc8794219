"""
Entry point for running flutterkit as a module.

Usage: python -m flutterkit [command] [options]
"""

from flutterkit.cli.parser import main

if __name__ == "__main__":
    main()
