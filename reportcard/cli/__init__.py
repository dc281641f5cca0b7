"""Command-line interface for reportcard."""
