"""Chess rules engine: board state, move legality, and game termination."""

__version__ = "0.1.0"
