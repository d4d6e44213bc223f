"""
Entry point for running the CLI as a module: `python -m cli`

Examples:
  python -m cli get serverSettings.port --config-dir config --env local
  python -m cli env --config-dir config
  python -m cli sources --config-dir config --file all --env production
"""

from cli import main

if __name__ == "__main__":
    main()
