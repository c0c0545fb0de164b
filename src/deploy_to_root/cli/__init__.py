"""Command-line interface for deploy-to-root."""
