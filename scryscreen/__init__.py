"""ScryScreen session engine: initiative tracking and dice evaluation."""

__version__ = "0.1.0"
