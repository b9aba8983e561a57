from kubernetes_asyncio import client

from conftest import make_pod, watch_event
from podreaper.models import InstanceKey, PodChangeEvent, WatchEventType


def test_instance_key_parts():
    key = InstanceKey.from_parts("prod", "web-1")
    assert key == "prod/web-1"
    assert key.namespace == "prod"
    assert key.name == "web-1"
    assert {key: True}.get("prod/web-1") is True


def test_instance_key_for_pod():
    assert InstanceKey.for_pod(make_pod("a", namespace="team")) == "team/a"


def test_event_from_pod_notification():
    event = PodChangeEvent.from_watch_event(watch_event("MODIFIED", make_pod("a")))
    assert event.type is WatchEventType.MODIFIED
    assert event.key == "ns/a"


def test_error_notification_has_no_pod():
    status = {"kind": "Status", "code": 410, "reason": "Expired"}
    event = PodChangeEvent.from_watch_event(watch_event("ERROR", status))
    assert event.type is WatchEventType.ERROR
    assert event.pod is None
    assert event.key is None


def test_unknown_type_maps_to_other():
    event = PodChangeEvent.from_watch_event(watch_event("SOMETHING", make_pod("a")))
    assert event.type is WatchEventType.OTHER


def test_missing_type_maps_to_other():
    event = PodChangeEvent.from_watch_event({"object": make_pod("a")})
    assert event.type is WatchEventType.OTHER


def test_pod_without_name_is_dropped():
    pod = client.V1Pod(metadata=client.V1ObjectMeta(namespace="ns"))
    assert PodChangeEvent.from_watch_event(watch_event("ADDED", pod)).pod is None
