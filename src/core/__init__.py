"""Shared infrastructure for scaffold-audit."""
