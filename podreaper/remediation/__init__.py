"""Remediation actions applied to crash-looping pods."""

from podreaper.remediation.executor import delete_pod

__all__ = ["delete_pod"]
