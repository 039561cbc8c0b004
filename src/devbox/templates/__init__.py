"""Bundled document, profile and config templates."""
