"""TimeLedger CLI — Typer-based command-line interface.

Provides the ``timeledger`` command with subcommands for punching the
timer, cycling projects, managing projects, labels and backups, and
exporting bundles and CSV reports.

All output uses Rich for formatted terminal display.
"""
