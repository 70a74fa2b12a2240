"""
Filter Chain
============

The filter chain applies an ordered list of :ref:`filter rules <filter rules>` to a stream of
catalog records.
It runs as an independent worker which takes one record at a time from its inbound handoff,
evaluates it and hands the result over to the outbound handoff.

Evaluation
----------

Rules are evaluated in declaration order.
Each rule inspects the fields selected by its target in the order
:code:`origin`, :code:`source`, :code:`metric`.
The pattern is always tested against the *current* field value, so a rule sees the rewrites of
all preceding rules and of the preceding fields of the same rule.

* a matching rewriting rule replaces all matches in the field by its rewrite template
* a matching discarding rule stops the evaluation, the record is dropped and never forwarded

A record which passes all rules is forwarded.
A chain without valid rules forwards every record unchanged.

..  code-block:: python
    :caption: Example - filter records on a worker thread

    output = Handoff()
    chain = FilterChain([{"pattern": "^test$", "target": "origin", "discard": True}], output)
    chain.start()
    chain.input.put(CatalogRecord(origin="collectd", source="host1", metric="load"))
    forwarded = output.get()
    chain.stop()
"""

import logging
import threading
from typing import Iterable, List, Optional, Protocol, Tuple

from attrs import define, field
from prometheus_client import CollectorRegistry

from catalogprep.catalog.record import CatalogRecord
from catalogprep.filter.events import EventKind, FilterEvent, LoggingObserver, Observer
from catalogprep.filter.exceptions import (
    FilterConfigurationError,
    InvalidPatternError,
    UnknownTargetError,
)
from catalogprep.filter.result import Discard, Forward, Outcome
from catalogprep.filter.rule import FilterRule
from catalogprep.metrics.metrics import CounterMetric, GaugeMetric
from catalogprep.metrics.metrics import Metrics as BaseMetrics
from catalogprep.util.queue import Handoff, HandoffClosed

logger = logging.getLogger("FilterChain")


class RecordSink(Protocol):
    """Anything accepting forwarded records"""

    def put(self, item: CatalogRecord) -> None: ...  # pragma: no cover


class FilterChain:
    """Filter catalog records by an ordered list of rules."""

    @define(kw_only=True)
    class Metrics(BaseMetrics):
        """Tracks statistics about a filter chain"""

        number_of_processed_records: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of records taken from the inbound handoff",
                name="number_of_processed_records",
            )
        )
        """Number of records taken from the inbound handoff"""
        number_of_forwarded_records: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of records handed over to the outbound handoff",
                name="number_of_forwarded_records",
            )
        )
        """Number of records handed over to the outbound handoff"""
        number_of_discarded_records: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of records dropped by discarding rules",
                name="number_of_discarded_records",
            )
        )
        """Number of records dropped by discarding rules"""
        number_of_rewritten_fields: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of field values rewritten by rules",
                name="number_of_rewritten_fields",
            )
        )
        """Number of field values rewritten by rules"""
        number_of_rejected_rules: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of rules rejected while building the chain",
                name="number_of_rejected_rules",
            )
        )
        """Number of rules rejected while building the chain"""
        number_of_active_rules: GaugeMetric = field(
            factory=lambda: GaugeMetric(
                description="Number of rules taking part in filtering",
                name="number_of_active_rules",
            )
        )
        """Number of rules taking part in filtering"""

    name: str
    input: Iterable[CatalogRecord]
    output: RecordSink
    rules: Tuple[FilterRule, ...]
    metrics: "FilterChain.Metrics"
    _observer: Observer
    _worker: Optional[threading.Thread]

    def __init__(
        self,
        filters: List[dict],
        output: RecordSink,
        name: str = "filter_chain",
        inbound: Optional[Iterable[CatalogRecord]] = None,
        observer: Optional[Observer] = None,
        registry: Optional[CollectorRegistry] = None,
    ):
        self.name = name
        self.input = inbound if inbound is not None else Handoff()
        self.output = output
        self._observer = observer if observer is not None else LoggingObserver()
        self._worker = None
        self.metrics = self.Metrics(
            labels={"component": "filter_chain", "name": name}, registry=registry
        )
        self.rules = tuple(self._compile_rules(filters or []))
        self.metrics.number_of_active_rules += len(self.rules)
        logger.debug(
            "%s loaded %d of %d rules", self.describe(), len(self.rules), len(filters or [])
        )

    def __repr__(self):
        return f"FilterChain(name={self.name!r}, rules={len(self.rules)})"

    def describe(self) -> str:
        """Return a name-like description of the chain."""
        return f"{self.__class__.__name__} ({self.name})"

    def _compile_rules(self, filters: List[dict]):
        for index, definition in enumerate(filters):
            try:
                yield FilterRule.from_dict(definition)
            except UnknownTargetError as error:
                self._reject(index, error, EventKind.UNKNOWN_TARGET, logging.ERROR)
            except InvalidPatternError as error:
                self._reject(index, error, EventKind.INVALID_PATTERN, logging.WARNING)
            except FilterConfigurationError as error:
                self._reject(index, error, EventKind.INVALID_RULE, logging.ERROR)

    def _reject(self, index: int, error: FilterConfigurationError, kind: EventKind, level: int):
        self.metrics.number_of_rejected_rules += 1
        self._observer(
            FilterEvent(
                kind=kind,
                level=level,
                message="%s: %s, discarding rule %d",
                args=(self.describe(), error.message, index),
                context={"index": index, "error": error},
            )
        )

    def evaluate(self, record: CatalogRecord) -> Outcome:
        """Apply all rules to a record.

        The record is modified in place.

        Returns
        -------
        Outcome
            :code:`Forward` with the record if it has to be forwarded or :code:`Discard` with the
            record, the matching field and the pattern if it has to be dropped.
        """
        for rule in self.rules:
            pattern = rule.compiled_pattern
            for record_field in rule.fields:
                value = getattr(record, record_field)
                if pattern.search(value) is None:
                    continue
                if rule.discard:
                    return Discard(record=record, matched_field=record_field, pattern=rule.pattern)
                setattr(record, record_field, rule.rewrite.apply(pattern, value))
                self.metrics.number_of_rewritten_fields += 1
        return Forward(record=record)

    def process(self, record: CatalogRecord) -> Outcome:
        """Evaluate one record and forward it unless it was discarded."""
        self.metrics.number_of_processed_records += 1
        outcome = self.evaluate(record)
        match outcome:
            case Forward(forwarded):
                self.output.put(forwarded)
                self.metrics.number_of_forwarded_records += 1
            case Discard(discarded, matched_field, pattern):
                self.metrics.number_of_discarded_records += 1
                self._observer(
                    FilterEvent(
                        kind=EventKind.DISCARD,
                        level=logging.DEBUG,
                        message="discard record %s, as %s matches `%s' pattern",
                        args=(discarded, matched_field, pattern),
                        context={
                            "record": discarded,
                            "field": matched_field,
                            "pattern": pattern,
                        },
                    )
                )
        return outcome

    def run(self) -> None:
        """Process records from the inbound handoff until it is closed and drained."""
        logger.debug("%s started", self.describe())
        try:
            for record in self.input:
                self.process(record)
        except HandoffClosed:
            logger.warning("%s outbound handoff was closed, stopping", self.describe())
            return
        logger.debug("%s reached end of stream", self.describe())

    def start(self) -> threading.Thread:
        """Run the chain on a daemon worker thread."""
        if self._worker is not None and self._worker.is_alive():
            return self._worker
        self._worker = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._worker.start()
        return self._worker

    def stop(self) -> None:
        """Signal the end of the stream to the worker.

        Only possible if the inbound handoff is owned by the chain or supports closing.
        """
        close = getattr(self.input, "close", None)
        if close is not None:
            close()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to finish. Returns whether the worker is finished."""
        if self._worker is None:
            return True
        self._worker.join(timeout)
        return not self._worker.is_alive()
