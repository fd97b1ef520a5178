"""pgnav - terminal explorer for PostgreSQL servers."""

__version__ = "0.1.0"
