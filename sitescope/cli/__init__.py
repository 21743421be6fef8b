"""Command line interface for SiteScope."""
