"""
podreaper data models: pod identity, watch notifications and remediation results.
"""

from enum import Enum
from typing import Any, Dict, Optional

from kubernetes_asyncio import client
from pydantic import Field

from podreaper.models.base import BasePodReaperModel


class InstanceKey(str):
    """
    Composite ``namespace/name`` identity of a pod.

    Behaves as a plain string so it can be compared with and used in place of
    ``"ns/name"`` literals as a mapping key.
    """

    __slots__ = ()

    @classmethod
    def from_parts(cls, namespace: str, name: str) -> "InstanceKey":
        return cls(f"{namespace}/{name}")

    @classmethod
    def for_pod(cls, pod: client.V1Pod) -> "InstanceKey":
        meta = pod.metadata
        return cls.from_parts(meta.namespace or "", meta.name or "")

    @property
    def namespace(self) -> str:
        return self.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.split("/", 1)[1] if "/" in self else ""


class WatchEventType(str, Enum):
    """Kind of a watch notification"""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value: object) -> "WatchEventType":
        return cls.OTHER


class PodChangeEvent(BasePodReaperModel):
    """A single pod watch notification."""

    type: WatchEventType = Field(..., description="Notification kind.")
    pod: Optional[client.V1Pod] = Field(
        None, description="Pod snapshot, absent for bookmarks, errors and non-pod objects."
    )

    @classmethod
    def from_watch_event(cls, event_obj: Dict[str, Any]) -> "PodChangeEvent":
        """
        Build an event from a ``kubernetes_asyncio.watch`` item.

        The watch yields ``{"type": ..., "object": ..., "raw_object": ...}``;
        anything whose object did not deserialize into a ``V1Pod`` (or whose
        pod has no name) is kept with ``pod=None`` so the controller ignores it.
        """
        event_type = WatchEventType(str(event_obj.get("type") or "OTHER").upper())
        obj = event_obj.get("object")
        if not isinstance(obj, client.V1Pod) or obj.metadata is None or not obj.metadata.name:
            obj = None
        return cls(type=event_type, pod=obj)

    @property
    def key(self) -> Optional[InstanceKey]:
        if self.pod is None:
            return None
        return InstanceKey.for_pod(self.pod)


class RemediationOutcome(BasePodReaperModel):
    """Result of one pod deletion attempt."""

    key: InstanceKey = Field(..., description="Pod the deletion was issued for.")
    success: bool = Field(..., description="True if the API accepted the deletion.")
    message: str = Field("", description="Human readable result or error detail.")
