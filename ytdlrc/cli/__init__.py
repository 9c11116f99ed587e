"""
Command-Line Interface Layer.

The Typer application and the Rich formatters used to present its output.
"""
