"""Cluster access: credential resolution and API client construction."""
