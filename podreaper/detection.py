"""Crash-loop detection for pod snapshots."""

from kubernetes_asyncio import client

CRASH_LOOP_REASON = "CrashLoopBackOff"


def is_crash_looping(pod: client.V1Pod) -> bool:
    """
    True if any container of the pod is waiting with reason CrashLoopBackOff.

    Init and ephemeral containers are not considered, and restart counts or
    timestamps play no part: one matching container status is enough.
    """
    status = pod.status
    if status is None or not status.container_statuses:
        return False

    for cs in status.container_statuses:
        state = cs.state
        if state is not None and state.waiting is not None:
            if state.waiting.reason == CRASH_LOOP_REASON:
                return True
    return False
