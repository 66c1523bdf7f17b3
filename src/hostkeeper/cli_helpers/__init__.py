"""Rendering helpers for the hostkeeper CLI."""
