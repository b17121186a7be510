"""Display text for binding descriptors.

Binder logs store the descriptor of every object bound at runtime, not its
display text; text is derived here at format time. The engine writes
descriptors as tagged JSON objects:

    {"Type": "Blob", "ContainerName": "photos", "BlobName": "cat.png", "Access": "Read"}

Descriptors this module cannot describe render to None and the formatter
skips them.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

Descriptor = Mapping[str, Any]


class DescriptorRenderer(Protocol):
    """Turns a binding descriptor into display text."""

    def render(self, descriptor: Descriptor | None) -> str | None:
        """Return display text, or None when the descriptor cannot be shown."""
        ...


def _text(descriptor: Descriptor, key: str) -> str | None:
    value = descriptor.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _attribute(name: str, *args: str) -> str:
    quoted = ", ".join(f'"{arg}"' for arg in args)
    return f"[{name}({quoted})]"


def _blob(descriptor: Descriptor) -> str | None:
    container = _text(descriptor, "ContainerName")
    blob = _text(descriptor, "BlobName")
    if container is None or blob is None:
        return None
    access = _text(descriptor, "Access")
    path = f'"{container}/{blob}"'
    if access is None:
        return f"[Blob({path})]"
    return f"[Blob({path}, FileAccess.{access})]"


def _blob_trigger(descriptor: Descriptor) -> str | None:
    container = _text(descriptor, "ContainerName")
    blob = _text(descriptor, "BlobName")
    if container is None or blob is None:
        return None
    return _attribute("BlobTrigger", f"{container}/{blob}")


def _table(descriptor: Descriptor) -> str | None:
    table = _text(descriptor, "TableName")
    if table is None:
        return None
    partition_key = _text(descriptor, "PartitionKey")
    row_key = _text(descriptor, "RowKey")
    if partition_key is not None and row_key is not None:
        return _attribute("Table", table, partition_key, row_key)
    return _attribute("Table", table)


def _queue(name: str) -> Callable[[Descriptor], str | None]:
    def render(descriptor: Descriptor) -> str | None:
        queue = _text(descriptor, "QueueName")
        return None if queue is None else _attribute(name, queue)

    return render


def _service_bus(descriptor: Descriptor) -> str | None:
    entity = _text(descriptor, "QueueOrTopicName")
    return None if entity is None else _attribute("ServiceBus", entity)


def _service_bus_trigger(descriptor: Descriptor) -> str | None:
    queue = _text(descriptor, "QueueName")
    if queue is not None:
        return _attribute("ServiceBusTrigger", queue)
    topic = _text(descriptor, "TopicName")
    subscription = _text(descriptor, "SubscriptionName")
    if topic is None or subscription is None:
        return None
    return _attribute("ServiceBusTrigger", topic, subscription)


_RENDERERS: dict[str, Callable[[Descriptor], str | None]] = {
    "Blob": _blob,
    "BlobTrigger": _blob_trigger,
    "Table": _table,
    "Queue": _queue("Queue"),
    "QueueTrigger": _queue("QueueTrigger"),
    "ServiceBus": _service_bus,
    "ServiceBusTrigger": _service_bus_trigger,
}


class AttributeTextRenderer:
    """Render storage binding descriptors as attribute text.

    Example:
        >>> AttributeTextRenderer().render({"Type": "Queue", "QueueName": "orders"})
        '[Queue("orders")]'
    """

    def render(self, descriptor: Descriptor | None) -> str | None:
        if descriptor is None:
            return None
        kind = descriptor.get("Type")
        if not isinstance(kind, str):
            return None
        renderer = _RENDERERS.get(kind)
        if renderer is None:
            return None
        return renderer(descriptor)
