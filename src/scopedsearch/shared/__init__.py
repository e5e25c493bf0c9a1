"""Shared primitives: errors, logging, timestamps."""
