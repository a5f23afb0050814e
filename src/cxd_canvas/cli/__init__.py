"""Command line interface for cxd-canvas."""
