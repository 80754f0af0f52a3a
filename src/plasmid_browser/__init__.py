"""Plasmid Browser: read-only search client for a lab plasmid inventory."""

__version__ = "0.1.0"
