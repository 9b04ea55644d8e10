"""
Infrastructure layer - logging, settings, and error types.

This layer contains technical concerns shared by the scheduling runtime
and the CLI: configuration loading, structured logging setup and the
exception hierarchy.
"""
