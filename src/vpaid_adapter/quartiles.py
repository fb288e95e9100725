"""Quartile progress reporting."""

import math
from dataclasses import dataclass
from typing import Iterable

from .event_bus import EventBus
from .events import AdapterLogEvents, AdEvent
from .exceptions import VpaidConfigValidationError
from .log_config import get_context_logger
from .metrics import AdapterMetrics, MetricLabels, MetricsCollector, NoOpMetrics


@dataclass(frozen=True)
class QuartileMark:
    """A progress threshold (percent played) and the event it fires."""

    threshold: float
    event: AdEvent


class QuartileSchedule:
    """Ordered, strictly increasing sequence of quartile marks."""

    def __init__(self, marks: Iterable[QuartileMark | tuple[float, AdEvent | str]]):
        normalized: list[QuartileMark] = []
        for mark in marks:
            if not isinstance(mark, QuartileMark):
                threshold, event = mark
                mark = QuartileMark(float(threshold), AdEvent(event))
            normalized.append(mark)

        for previous, current in zip(normalized, normalized[1:]):
            if current.threshold <= previous.threshold:
                raise VpaidConfigValidationError(
                    "Quartile thresholds must be strictly increasing",
                    config_key="quartile_schedule",
                    config_value=f"{previous.threshold} -> {current.threshold}",
                )
        self.marks: tuple[QuartileMark, ...] = tuple(normalized)

    @classmethod
    def default(cls) -> "QuartileSchedule":
        return cls(
            [
                (0, AdEvent.VIDEO_START),
                (25, AdEvent.VIDEO_FIRST_QUARTILE),
                (50, AdEvent.VIDEO_MIDPOINT),
                (75, AdEvent.VIDEO_THIRD_QUARTILE),
                (100, AdEvent.VIDEO_COMPLETE),
            ]
        )

    def __len__(self) -> int:
        return len(self.marks)

    def __getitem__(self, index: int) -> QuartileMark:
        return self.marks[index]

    def __iter__(self):
        return iter(self.marks)

    def events(self) -> list[AdEvent]:
        return [mark.event for mark in self.marks]


class QuartileReporter:
    """Fires each scheduled quartile event once, in threshold order.

    The cursor only moves forward for the lifetime of the reporter, so a
    progress value going backwards (seek, rounding) never re-fires an event
    and a large jump fires every crossed mark in one call.
    """

    def __init__(
        self,
        bus: EventBus,
        schedule: QuartileSchedule | None = None,
        metrics: MetricsCollector | None = None,
    ):
        self.bus = bus
        self.schedule = schedule or QuartileSchedule.default()
        self.metrics = metrics or NoOpMetrics()
        self.last_quartile_index = 0
        self.halted = False
        self.logger = get_context_logger("quartile_reporter")

    @property
    def is_complete(self) -> bool:
        return self.last_quartile_index >= len(self.schedule)

    def halt(self) -> None:
        """Stop reporting, including marks still pending in a running call."""
        self.halted = True

    def on_progress(self, percent_played: float) -> list[AdEvent]:
        """Report playback progress.

        Args:
            percent_played: Percentage of the media played (0-100)

        Returns:
            Events dispatched by this call, in order
        """
        fired: list[AdEvent] = []
        if percent_played is None or not math.isfinite(percent_played):
            return fired

        while (
            not self.halted
            and not self.is_complete
            and percent_played >= self.schedule[self.last_quartile_index].threshold
        ):
            mark = self.schedule[self.last_quartile_index]
            self.last_quartile_index += 1
            self.logger.info(
                AdapterLogEvents.QUARTILE_REACHED,
                quartile_event=mark.event.value,
                threshold=mark.threshold,
                percent_played=round(percent_played, 1),
            )
            self.metrics.increment(
                AdapterMetrics.QUARTILES_REPORTED,
                labels={MetricLabels.EVENT: mark.event.value},
            )
            fired.append(mark.event)
            self.bus.dispatch(mark.event)
        return fired


__all__ = ["QuartileMark", "QuartileSchedule", "QuartileReporter"]
