"""Observability instrumentation."""
