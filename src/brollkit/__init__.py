"""brollkit: B-roll task tracking and stock asset storage."""

__version__ = "0.1.0"
