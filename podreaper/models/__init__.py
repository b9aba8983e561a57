"""
podreaper data models.
"""

from podreaper.models.base import BasePodReaperModel
from podreaper.models.schema import (
    InstanceKey,
    PodChangeEvent,
    RemediationOutcome,
    WatchEventType,
)

__all__ = [
    "BasePodReaperModel",
    "InstanceKey",
    "PodChangeEvent",
    "RemediationOutcome",
    "WatchEventType",
]
