"""Convert Container Analysis vulnerability occurrences into Coverity cov-import-results bundles."""

__version__ = "0.1.0"
