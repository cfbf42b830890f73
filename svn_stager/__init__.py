"""Stage Subversion checkouts into a working directory for build pipelines."""

__version__ = "0.1.0"
