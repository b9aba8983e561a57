import asyncio
import socket
from typing import Any, Dict, Iterator, List, Optional

import pytest
from kubernetes_asyncio import client
from loguru import logger


def make_pod(
    name: str,
    namespace: str = "ns",
    waiting_reason: Optional[str] = None,
    running: bool = False,
    containers: int = 1,
) -> client.V1Pod:
    """Pod snapshot whose first container is waiting/running and the rest are running."""
    statuses = []
    for i in range(containers):
        if i == 0 and waiting_reason is not None:
            state = client.V1ContainerState(
                waiting=client.V1ContainerStateWaiting(reason=waiting_reason)
            )
        elif i > 0 or running:
            state = client.V1ContainerState(running=client.V1ContainerStateRunning())
        else:
            state = None
        statuses.append(
            client.V1ContainerStatus(
                name=f"c{i}",
                image="busybox:latest",
                image_id="",
                ready=state is not None and state.running is not None,
                restart_count=3 if waiting_reason else 0,
                state=state,
            )
        )
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        status=client.V1PodStatus(container_statuses=statuses or None),
    )


def watch_event(event_type: str, obj: Any) -> Dict[str, Any]:
    return {"type": event_type, "object": obj, "raw_object": {}}


class FakeWatch:
    """Stand-in for kubernetes_asyncio.watch.Watch replaying canned events."""

    def __init__(
        self,
        events=(),
        error: Optional[BaseException] = None,
        block: bool = False,
        open_error: Optional[BaseException] = None,
    ):
        self.events = list(events)
        self.error = error
        self.open_error = open_error
        self.resp = None
        self.block = block
        self.stream_calls: List[Dict[str, Any]] = []
        self.delivered = 0
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    def stream(self, func, *args, **kwargs):
        self.stream_calls.append(kwargs)
        return self._iterate()

    async def _iterate(self):
        # mirrors Watch: the HTTP request happens on the first read
        if self.open_error is not None:
            raise self.open_error
        self.resp = object()
        for event in self.events:
            await asyncio.sleep(0)
            self.delivered += 1
            yield event
        if self.error is not None:
            raise self.error
        if self.block:
            await asyncio.Event().wait()

    def stop(self):
        pass


class FakeCoreApi:
    """Records delete_namespaced_pod calls instead of talking to a cluster."""

    def __init__(self, error: Optional[Exception] = None, delay: float = 0.0, on_delete=None):
        self.error = error
        self.delay = delay
        self.on_delete = on_delete
        self.deleted: List[str] = []
        self.completed: List[str] = []

    async def list_namespaced_pod(self, namespace, **kwargs):
        raise AssertionError("the fake watch never calls the list function")

    async def delete_namespaced_pod(self, name, namespace, **kwargs):
        key = f"{namespace}/{name}"
        self.deleted.append(key)
        if self.on_delete is not None:
            self.on_delete(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.completed.append(key)
        return client.V1Pod(metadata=client.V1ObjectMeta(name=name, namespace=namespace))


@pytest.fixture
def core_api() -> FakeCoreApi:
    return FakeCoreApi()


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def log_records() -> Iterator[List[Dict[str, Any]]]:
    """Loguru records emitted during the test."""
    records: List[Dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
