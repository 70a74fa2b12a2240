"""
Filter Events
=============

Filter chains do not log by themselves.
They report rejected rules and discarded records as structured :code:`FilterEvent` objects to an
observer, which is any callable accepting one event.
The default observer is the :code:`LoggingObserver`, which writes the events to the
:code:`FilterChain` logger:

.. table::

    +------------------------+-----------+------------------------------------------------+
    | kind                   | level     | emitted when                                   |
    +========================+===========+================================================+
    | :code:`unknown_target` | ERROR     | a rule names an unknown target                 |
    +------------------------+-----------+------------------------------------------------+
    | :code:`invalid_rule`   | ERROR     | a rule definition is malformed                 |
    +------------------------+-----------+------------------------------------------------+
    | :code:`invalid_pattern`| WARNING   | a rule pattern can not be compiled             |
    +------------------------+-----------+------------------------------------------------+
    | :code:`discard`        | DEBUG     | a record is dropped by a discarding rule       |
    +------------------------+-----------+------------------------------------------------+
"""

import logging
from enum import Enum
from typing import Callable, Optional

from attrs import define, field, validators

logger = logging.getLogger("FilterChain")


class EventKind(str, Enum):
    """Kinds of filter events"""

    UNKNOWN_TARGET = "unknown_target"
    INVALID_RULE = "invalid_rule"
    INVALID_PATTERN = "invalid_pattern"
    DISCARD = "discard"


@define(kw_only=True, frozen=True)
class FilterEvent:
    """A structured observation of a filter chain."""

    kind: EventKind = field(validator=validators.instance_of(EventKind))
    """What happened"""
    level: int = field(validator=validators.instance_of(int))
    """Severity as :code:`logging` level"""
    message: str = field(validator=validators.instance_of(str))
    """Message in :code:`%`-format"""
    args: tuple = field(validator=validators.instance_of(tuple), default=())
    """Arguments for the message"""
    context: dict = field(validator=validators.instance_of(dict), factory=dict, hash=False)
    """Structured details, e.g. the rule index, the record or the pattern"""

    def render(self) -> str:
        """Return the formatted message."""
        return self.message % self.args if self.args else self.message


Observer = Callable[[FilterEvent], None]


class LoggingObserver:
    """Write filter events to a logger."""

    def __init__(self, event_logger: Optional[logging.Logger] = None):
        self._logger = event_logger if event_logger is not None else logger

    def __call__(self, event: FilterEvent) -> None:
        if not self._logger.isEnabledFor(event.level):
            return
        self._logger.log(
            event.level, event.message, *event.args, extra={"filter_event": event.kind.value}
        )
