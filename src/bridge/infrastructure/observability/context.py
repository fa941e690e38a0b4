"""Per-event metadata attached to probe output.

One inbound chat event can touch the adapter, both repositories and the
resolution service. Binding the same ObservationContext to each probe lets
their log lines be joined on ``event_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable bag of fields merged into every event of a bound probe.

    Attributes:
        event_id: Identifier of the inbound chat event being handled.
        channel: Messaging platform the event came from (e.g. "whatsapp").
        external_id: External group identifier the event belongs to.
        extra: Anything else worth correlating on.

    Example:
        context = ObservationContext(event_id="msg-123", channel="whatsapp")
        probe = DefaultGroupResolutionProbe().with_context(context)
    """

    event_id: str | None = None
    channel: str | None = None
    external_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to logging kwargs, leaving out unset fields.

        ``external_id`` is emitted as ``context_external_id`` because most
        probe methods already take an ``external_id`` argument.
        """
        fields = {
            "event_id": self.event_id,
            "channel": self.channel,
            "context_external_id": self.external_id,
        }
        result = {key: value for key, value in fields.items() if value is not None}
        result.update(self.extra)
        return result

    def with_external_id(self, external_id: str) -> ObservationContext:
        """Copy of this context scoped to one group."""
        return replace(self, external_id=external_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Copy of this context with more fields in ``extra``."""
        return replace(self, extra={**self.extra, **kwargs})
