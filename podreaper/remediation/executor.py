import asyncio

from kubernetes_asyncio import client
from kubernetes_asyncio.client.exceptions import ApiException

from podreaper.logging import get_logger
from podreaper.models import InstanceKey, RemediationOutcome

log = get_logger("remediation.executor")


async def delete_pod(
    core_v1: client.CoreV1Api,
    key: InstanceKey,
    timeout: float,
) -> RemediationOutcome:
    """
    Delete a pod so that its owning controller recreates it.

    The request is bounded by ``timeout`` seconds. Cancellation of the calling
    task is not caught here, so a shutdown abandons an in-flight deletion.
    There is no retry: both outcomes are final for this attempt.

    Args:
        core_v1: CoreV1Api bound to the shared API client
        key: The pod to delete
        timeout: Upper bound for the API call in seconds

    Returns:
        RemediationOutcome describing success or the error
    """
    try:
        await asyncio.wait_for(
            core_v1.delete_namespaced_pod(name=key.name, namespace=key.namespace),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        return RemediationOutcome(
            key=key,
            success=False,
            message=f"timed out after {timeout:g}s waiting for pod deletion",
        )
    except ApiException as e:
        return RemediationOutcome(
            key=key, success=False, message=f"API error deleting pod: {e.status} - {e.reason}"
        )
    except Exception as e:
        log.debug(f"Unexpected error deleting pod {key}: {e!r}")
        return RemediationOutcome(key=key, success=False, message=f"Error deleting pod: {e}")

    return RemediationOutcome(key=key, success=True, message=f"deleted pod {key}")
