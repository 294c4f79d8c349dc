"""Command-line entry points for devpods."""
