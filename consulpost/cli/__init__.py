"""consulpost CLI — Typer-based command-line interface."""
