"""
Exception classes for podreaper.

Only startup failures are raised as exceptions; they end the process.
Failures while remediating a single pod are reported as values instead
(see ``podreaper.models.RemediationOutcome``).
"""

from typing import Any, Dict, Optional


class PodReaperError(Exception):
    """Base exception class for all podreaper exceptions."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class CredentialsError(PodReaperError):
    """Raised when neither in-cluster nor kubeconfig credentials can be loaded."""
    pass


class ClientConstructionError(PodReaperError):
    """Raised when the Kubernetes API client cannot be built from the loaded config."""
    pass


class SubscriptionError(PodReaperError):
    """Raised when the pod watch cannot be opened."""

    def __init__(self, namespace: str, reason: str):
        super().__init__(
            f"failed to start pod watch: {reason}",
            {"namespace": namespace},
        )
        self.namespace = namespace


class LivenessServerError(PodReaperError):
    """Raised when the /healthz endpoint fails to bind or dies unexpectedly."""

    def __init__(self, port: int, reason: str):
        super().__init__(f"health server error: {reason}", {"port": port})
        self.port = port
