"""Command-line tools for shortlink."""
