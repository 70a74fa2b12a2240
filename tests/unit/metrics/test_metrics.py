# pylint: disable=missing-docstring
# pylint: disable=protected-access
import pytest
from attrs import define, field
from prometheus_client import CollectorRegistry, Counter, Gauge

from catalogprep.metrics.metrics import CounterMetric, GaugeMetric, Metrics


@define(kw_only=True)
class ExampleMetrics(Metrics):
    number_of_things: CounterMetric = field(
        factory=lambda: CounterMetric(description="Number of things", name="number_of_things")
    )
    current_things: GaugeMetric = field(
        factory=lambda: GaugeMetric(description="Current things", name="current_things")
    )


class TestCounterMetric:
    def test_init_tracker_creates_counter(self, registry):
        metric = CounterMetric(
            name="test_counter", description="test", labels={"a": "b"}, registry=registry
        )
        metric.init_tracker()
        assert isinstance(metric.tracker, Counter)
        assert metric.fullname == "catalogprep_test_counter"

    def test_add_increments(self, registry):
        metric = CounterMetric(
            name="test_counter", description="test", labels={"a": "b"}, registry=registry
        )
        metric.init_tracker()
        metric += 1
        metric += 2
        assert registry.get_sample_value("catalogprep_test_counter_total", {"a": "b"}) == 3

    def test_labels_have_to_be_strings(self):
        with pytest.raises(TypeError):
            CounterMetric(name="test_counter", description="test", labels={"a": 1})

    def test_existing_tracker_is_reused(self, registry):
        first = CounterMetric(
            name="test_counter", description="test", labels={"a": "b"}, registry=registry
        )
        first.init_tracker()
        second = CounterMetric(
            name="test_counter", description="test", labels={"a": "c"}, registry=registry
        )
        second.init_tracker()
        assert first.tracker is second.tracker

    def test_existing_tracker_of_other_type_raises(self, registry):
        CounterMetric(
            name="test_metric", description="test", labels={"a": "b"}, registry=registry
        ).init_tracker()
        gauge = GaugeMetric(
            name="test_metric", description="test", labels={"a": "b"}, registry=registry
        )
        with pytest.raises(ValueError, match="already exists with different type"):
            gauge.init_tracker()


class TestGaugeMetric:
    def test_add_sets_value(self, registry):
        metric = GaugeMetric(
            name="test_gauge", description="test", labels={"a": "b"}, registry=registry
        )
        metric.init_tracker()
        metric += 5
        metric += 3
        assert isinstance(metric.tracker, Gauge)
        assert registry.get_sample_value("catalogprep_test_gauge", {"a": "b"}) == 3


class TestMetrics:
    def test_metrics_get_labels_and_registry(self, registry):
        metrics = ExampleMetrics(labels={"component": "example"}, registry=registry)
        assert metrics.number_of_things.labels == {"component": "example"}
        assert metrics.current_things._registry is registry

    def test_metrics_are_tracked(self, registry):
        metrics = ExampleMetrics(labels={"component": "example"}, registry=registry)
        metrics.number_of_things += 4
        metrics.current_things += 2
        labels = {"component": "example"}
        assert registry.get_sample_value("catalogprep_number_of_things_total", labels) == 4
        assert registry.get_sample_value("catalogprep_current_things", labels) == 2

    def test_metrics_without_registry_are_not_registered(self, registry):
        metrics = ExampleMetrics(labels={"component": "example"})
        metrics.number_of_things += 1
        assert registry.get_sample_value(
            "catalogprep_number_of_things_total", {"component": "example"}
        ) is None

    def test_metrics_without_registry_can_be_created_twice(self):
        first = ExampleMetrics(labels={"component": "example"})
        second = ExampleMetrics(labels={"component": "example"})
        assert first.number_of_things.tracker is not second.number_of_things.tracker
        assert isinstance(second.current_things.tracker, Gauge)

    def test_registries_do_not_share_trackers(self, registry):
        first = ExampleMetrics(labels={"component": "example"}, registry=registry)
        second = ExampleMetrics(labels={"component": "example"}, registry=CollectorRegistry())
        assert first.number_of_things.tracker is not second.number_of_things.tracker
