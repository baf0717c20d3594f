"""Crossword puzzle generator for vocabulary practice.

This package exposes the public API surface via:

- ``lexigrid.engine.generator.PuzzleGenerator``: clusters a word collection
  and builds one connected, cropped puzzle per cluster.
- ``lexigrid.engine.background.BackgroundGenerator``: runs jobs off-thread
  with cooperative cancellation.
- ``lexigrid.data.wordlist`` helpers: load ``WORD:Clue`` and JSON word lists.
"""

from .core.models import PlacedWord, Puzzle, Word
from .engine.background import BackgroundGenerator, GenerationJob
from .engine.generator import GenerationReport, GeneratorConfig, PuzzleGenerator
from .data.wordlist import load_words, parse_word_entries

__all__ = [
    "BackgroundGenerator",
    "GenerationJob",
    "GenerationReport",
    "GeneratorConfig",
    "PlacedWord",
    "Puzzle",
    "PuzzleGenerator",
    "Word",
    "load_words",
    "parse_word_entries",
]

__version__ = "0.1.0"
