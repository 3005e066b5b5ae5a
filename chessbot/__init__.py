"""Chess opponent: position evaluation, quiescence and alpha-beta search with an opening catalogue."""

__version__ = "1.0.0"
