"""Outcomes of the evaluation of one record by a filter chain."""

from attrs import define, field, validators

from catalogprep.catalog.record import CatalogRecord


@define(kw_only=True, frozen=True)
class Forward:
    """The record passed all rules and has to be forwarded."""

    __match_args__ = ("record",)

    record: CatalogRecord = field(validator=validators.instance_of(CatalogRecord))
    """The (possibly rewritten) record"""


@define(kw_only=True, frozen=True)
class Discard:
    """A discarding rule matched and the record has to be dropped."""

    __match_args__ = ("record", "matched_field", "pattern")

    record: CatalogRecord = field(validator=validators.instance_of(CatalogRecord))
    """The dropped record with the field values at the time of the match"""
    matched_field: str = field(validator=validators.instance_of(str))
    """The name of the field which matched"""
    pattern: str = field(validator=validators.instance_of(str))
    """The pattern of the discarding rule"""


Outcome = Forward | Discard
