"""This module contains the catalogprep runner which wires the reading, filtering and writing
of catalog records."""

import logging
import threading
from typing import Optional, TextIO

from attrs import define, field
from prometheus_client import CollectorRegistry

from catalogprep.catalog.record import CatalogRecord, InvalidRecordError
from catalogprep.filter.chain import FilterChain
from catalogprep.metrics.exporter import PrometheusExporter
from catalogprep.metrics.metrics import CounterMetric
from catalogprep.metrics.metrics import Metrics as BaseMetrics
from catalogprep.util.configuration import Configuration
from catalogprep.util.defaults import DEFAULT_STOP_TIMEOUT, EXITCODES
from catalogprep.util.queue import Handoff, HandoffClosed


class Runner:
    """Provide the main entry point.

    The runner reads JSON lines from an input stream on a reader thread, hands the decoded
    records over to the filter chain worker and writes the forwarded records as JSON lines to an
    output stream on the calling thread.

    Example
    -------
    >>> configuration = Configuration.from_sources(["path/to/config.yml"])
    >>> runner = Runner(configuration)
    >>> runner.start(sys.stdin, sys.stdout)
    """

    @define(kw_only=True)
    class Metrics(BaseMetrics):
        """Metrics for the catalogprep Runner."""

        number_of_invalid_records: CounterMetric = field(
            factory=lambda: CounterMetric(
                description="Number of input lines which could not be decoded to a record",
                name="number_of_invalid_records",
            )
        )
        """Number of input lines which could not be decoded to a record"""

    def __init__(
        self, configuration: Configuration, registry: Optional[CollectorRegistry] = None
    ) -> None:
        self.exit_code = EXITCODES.SUCCESS
        self._configuration = configuration
        self._logger = logging.getLogger("Runner")
        self.registry = registry if registry is not None else CollectorRegistry()
        self.metrics = self.Metrics(
            labels={"component": "runner", "name": "runner"}, registry=self.registry
        )
        capacity = configuration.handoff_capacity
        self.output = Handoff(capacity)
        self.chain = FilterChain(
            configuration.filters,
            self.output,
            inbound=Handoff(capacity),
            registry=self.registry,
        )
        self._exporter = None
        if configuration.metrics.enabled:
            self._exporter = PrometheusExporter(configuration.metrics, self.registry)

    def start(self, input_stream: TextIO, output_stream: TextIO) -> None:
        """Start processing.

        This runs until the input stream is exhausted or :code:`stop` is called.
        """
        if self._exporter is not None:
            self._exporter.run()
        worker = threading.Thread(target=self._filter, name=self.chain.name, daemon=True)
        worker.start()
        reader = threading.Thread(
            target=self._read, args=(input_stream,), name="Reader", daemon=True
        )
        reader.start()
        self._logger.info("Startup complete")
        try:
            for record in self.output:
                output_stream.write(record.to_json() + "\n")
                output_stream.flush()
        finally:
            self.stop()
            self.output.close()
            worker.join(DEFAULT_STOP_TIMEOUT)
            if self._exporter is not None:
                self._exporter.shut_down()
        self._logger.info("Shut down complete")

    def stop(self) -> None:
        """Stop the runner. Is called by the signal handler in run_catalogprep.py.

        Records which were already taken by the filter chain are still written.
        """
        self.chain.stop()

    def _filter(self) -> None:
        try:
            self.chain.run()
        except Exception:  # pylint: disable=broad-except
            self._logger.exception("Filter chain stopped on an unexpected error")
            self.exit_code = EXITCODES.PIPELINE_ERROR
            self.chain.stop()
        finally:
            self.output.close()

    def _read(self, input_stream: TextIO) -> None:
        try:
            for line_number, line in enumerate(input_stream, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = CatalogRecord.from_json(line)
                except InvalidRecordError as error:
                    self.metrics.number_of_invalid_records += 1
                    self._logger.warning("Skipping input line %d: %s", line_number, error)
                    continue
                self.chain.input.put(record)
        except HandoffClosed:
            self._logger.debug("Filter chain closed before the input stream was exhausted")
        finally:
            self.chain.stop()
