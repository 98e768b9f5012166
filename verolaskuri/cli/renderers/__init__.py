"""Text renderers for CLI output."""
