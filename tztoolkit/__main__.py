"""
Entry point for ``python -m tztoolkit``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
