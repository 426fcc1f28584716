"""
Entry point for running flashdeck as a module.

Usage:
    python -m flashdeck decks
    python -m flashdeck study "Spanish Verbs"
    python -m flashdeck --help
"""
from .cli import main

if __name__ == "__main__":
    main()
