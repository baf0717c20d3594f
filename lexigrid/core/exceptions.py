"""Custom exception hierarchy for puzzle generation."""


class LexigridError(Exception):
    """Base exception for generator failures."""


class PlacementError(LexigridError):
    """Raised when a validated placement cannot be written to the grid."""


class ClusteringError(LexigridError):
    """Raised when a clustering does not cover its input words exactly."""


class ValidationError(LexigridError):
    """Raised when a grid integrity check fails."""


class WordListError(LexigridError):
    """Raised when a word list file cannot be parsed."""
