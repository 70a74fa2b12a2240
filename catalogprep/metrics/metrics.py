"""
catalogprep provides prometheus metrics about the filtering of catalog records, e.g.
:code:`catalogprep_number_of_discarded_records_total`.

Configuration
=============

..  code-block:: yaml
    :linenos:

    metrics:
      enabled: true
      port: 8000

enabled
-------
Use :code:`true` or :code:`false` to activate or deactivate the metrics exporter. Defaults to
:code:`false`.

port
----
Specifies the port which should be used for the prometheus exporter endpoint. Defaults to
:code:`8000`.

Metrics Overview
================

.. autoclass:: catalogprep.filter.chain.FilterChain.Metrics
   :members:
   :undoc-members:
   :private-members:
   :inherited-members:
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Type, Union
from weakref import WeakKeyDictionary

from attrs import define, field, fields, validators
from prometheus_client import CollectorRegistry, Counter, Gauge

PREFIX = "catalogprep_"

_collectors: "WeakKeyDictionary[CollectorRegistry, Dict[str, Union[Counter, Gauge]]]" = (
    WeakKeyDictionary()
)


def _get_collector(
    collector_type: Type[Union[Counter, Gauge]],
    name: str,
    documentation: str,
    labelnames: tuple,
    registry: Optional[CollectorRegistry],
) -> Union[Counter, Gauge]:
    """returns the collector registered under name or creates and registers a new one"""
    if registry is None:
        return collector_type(name, documentation, labelnames, registry=None)
    known = _collectors.setdefault(registry, {})
    collector = known.get(name)
    if collector is None:
        collector = collector_type(name, documentation, labelnames, registry=registry)
        known[name] = collector
    if not isinstance(collector, collector_type):
        raise ValueError(f"Metric {name} already exists with different type")
    return collector


@define(kw_only=True, slots=False)
class Metric(ABC):
    """Metric base class"""

    name: str = field(validator=validators.instance_of(str))
    description: str = field(validator=validators.instance_of(str))
    labels: dict = field(
        validator=[
            validators.instance_of(dict),
            validators.deep_mapping(
                key_validator=validators.instance_of(str),
                value_validator=validators.instance_of(str),
            ),
        ],
        factory=dict,
    )
    _registry: Optional[CollectorRegistry] = field(default=None)
    collector_type: ClassVar[Type[Union[Counter, Gauge]]]
    tracker: Union[Counter, Gauge] = field(init=False, default=None)

    @property
    def fullname(self):
        """returns the fullname"""
        return f"{PREFIX}{self.name}"

    def init_tracker(self) -> None:
        """initializes the tracker and registers it in the registry if one is given"""
        self.tracker = _get_collector(
            self.collector_type,
            self.fullname,
            self.description,
            tuple(self.labels.keys()),
            self._registry,
        )
        self.tracker.labels(**self.labels)

    @abstractmethod
    def __add__(self, other):
        """Add"""


@define(kw_only=True)
class CounterMetric(Metric):
    """Wrapper for prometheus Counter metric"""

    collector_type = Counter

    def __add__(self, other: Any) -> "CounterMetric":
        self.tracker.labels(**self.labels).inc(other)
        return self


@define(kw_only=True)
class GaugeMetric(Metric):
    """Wrapper for prometheus Gauge metric"""

    collector_type = Gauge

    def __add__(self, other: Any) -> "GaugeMetric":
        self.tracker.labels(**self.labels).set(other)
        return self


@define(kw_only=True)
class Metrics:
    """Base class for a group of metrics sharing labels and registry"""

    _labels: dict
    _registry: Optional[CollectorRegistry] = field(default=None)

    def __attrs_post_init__(self):
        for attribute in fields(type(self)):
            metric = getattr(self, attribute.name)
            if isinstance(metric, Metric):
                metric.labels = self._labels
                metric._registry = self._registry  # pylint: disable=protected-access
                metric.init_tracker()
