"""Command line interface for fleet-release."""
