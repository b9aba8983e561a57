"""
Crash-loop remediation controller.

Watches the pods of one namespace and deletes any pod that enters
CrashLoopBackOff so its owner recreates it. A pod is remediated at most once
per crash episode; the episode closes when the pod is deleted or observed
healthy again.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from kubernetes_asyncio import client, watch

from podreaper.detection import CRASH_LOOP_REASON, is_crash_looping
from podreaper.exceptions import SubscriptionError
from podreaper.logging import get_logger
from podreaper.models import InstanceKey, PodChangeEvent, RemediationOutcome, WatchEventType
from podreaper.remediation import delete_pod

DEFAULT_DELETE_TIMEOUT = 10.0

LIVE_EVENT_TYPES = (WatchEventType.ADDED, WatchEventType.MODIFIED)


@dataclass
class ControllerStats:
    events_seen: int = 0
    remediations_attempted: int = 0
    remediations_succeeded: int = 0
    remediations_failed: int = 0


class CrashLoopController:
    """
    Single consumer of a namespace-scoped pod watch.

    Events are handled strictly one at a time in delivery order. The
    ``reported`` mapping (pod key -> already remediated in this episode) is
    owned by the controller and only touched from its own task, so no locking
    is needed. Pass a mapping in to share or inspect it from the outside.
    """

    def __init__(
        self,
        core_api: client.CoreV1Api,
        namespace: str,
        delete_timeout: float = DEFAULT_DELETE_TIMEOUT,
        reported: Optional[Dict[InstanceKey, bool]] = None,
        watch_factory: Callable[[], watch.Watch] = watch.Watch,
    ):
        self._core_api = core_api
        self.namespace = namespace
        self._delete_timeout = delete_timeout
        self._reported: Dict[InstanceKey, bool] = reported if reported is not None else {}
        self._watch_factory = watch_factory
        self.stats = ControllerStats()
        self._logger = get_logger("controller")

    @property
    def reported(self) -> Dict[InstanceKey, bool]:
        return self._reported

    def is_reported(self, key: str) -> bool:
        return self._reported.get(InstanceKey(key), False)

    def unmark(self, key: InstanceKey) -> None:
        self._reported.pop(key, None)

    async def run(self) -> None:
        """
        Consume the pod watch until the stream ends or the task is cancelled.

        Raises:
            SubscriptionError: if the watch request itself fails (no HTTP
                response was obtained and nothing was delivered).
        """
        self._logger.info(f"watching namespace: {self.namespace}")
        opened = False
        try:
            async with self._watch_factory() as w:
                stream = w.stream(self._core_api.list_namespaced_pod, namespace=self.namespace)
                iterator = stream.__aiter__()
                while True:
                    try:
                        event_obj = await iterator.__anext__()
                    except StopAsyncIteration:
                        break
                    except asyncio.CancelledError:
                        raise
                    except Exception as e:
                        # kubernetes_asyncio keeps the open watch response on `resp`
                        opened = opened or getattr(w, "resp", None) is not None
                        if not opened:
                            raise SubscriptionError(self.namespace, _describe(e)) from e
                        self._logger.warning(f"watch stream failed: {_describe(e)}")
                        break

                    opened = True
                    await self.handle_event(PodChangeEvent.from_watch_event(event_obj))
        except asyncio.CancelledError:
            self._logger.debug("controller task cancelled, closing pod watch")
            raise
        finally:
            self._logger.debug(f"controller stats: {self.stats}")

        self._logger.info("watch channel closed")

    async def handle_event(self, event: PodChangeEvent) -> Optional[RemediationOutcome]:
        """
        Apply one watch notification to the reported set.

        Returns the remediation outcome when a deletion was issued, else None.
        """
        key = event.key
        if key is None:
            return None
        self.stats.events_seen += 1

        if event.type is WatchEventType.DELETED:
            self.unmark(key)
            return None
        if event.type not in LIVE_EVENT_TYPES:
            return None

        if is_crash_looping(event.pod):
            if self._reported.get(key):
                return None
            # Marked before dispatch: redelivered events during the delete are no-ops
            self._reported[key] = True
            return await self.remediate(key)

        if self._reported.get(key):
            self._logger.info(f"pod {key} recovered from {CRASH_LOOP_REASON}")
            self.unmark(key)
        return None

    async def remediate(self, key: InstanceKey) -> RemediationOutcome:
        """Delete the pod once; failures are logged and never retried."""
        self._logger.info(f"restarted pod {key} due to {CRASH_LOOP_REASON}")
        self.stats.remediations_attempted += 1

        outcome = await delete_pod(self._core_api, key, self._delete_timeout)
        if outcome.success:
            self.stats.remediations_succeeded += 1
            self._logger.info(f"deleted pod {key}")
        else:
            self.stats.remediations_failed += 1
            self._logger.error(f"failed to delete pod {key}: {outcome.message}")
        return outcome


def _describe(exc: Exception) -> str:
    if isinstance(exc, client.ApiException):
        return f"{exc.status} - {exc.reason}"
    return str(exc) or exc.__class__.__name__
