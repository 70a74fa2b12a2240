"""
Catalog Records
===============

A catalog record is the identity of one observed metric stream.
It names the monitoring :code:`origin` (the data source system), the :code:`source`
(host or entity within the origin) and the :code:`metric` (the specific measurement).

Records are exchanged as JSON lines:

..  code-block:: json
    :caption: Example - catalog record

    {"origin": "collectd", "source": "host1.example.org", "metric": "cpu.0.idle"}

A record is owned by exactly one stage at a time.
The filter chain mutates the fields of a record in place and forwards it or drops it.
"""

import msgspec
from attrs import asdict, define, field, validators

from catalogprep.abc.exceptions import CatalogprepException

_decoder = msgspec.json.Decoder()
_encoder = msgspec.json.Encoder()


class InvalidRecordError(CatalogprepException):
    """Raise if a record could not be decoded from its external representation."""


@define(kw_only=True)
class CatalogRecord:
    """Identity of one observed metric stream."""

    origin: str = field(validator=validators.instance_of(str))
    """Name of the data source system"""
    source: str = field(validator=validators.instance_of(str))
    """Name of the host or entity within the origin"""
    metric: str = field(validator=validators.instance_of(str))
    """Name of the specific measurement"""

    def as_dict(self) -> dict:
        """Return the record as dict."""
        return asdict(self)

    def to_json(self) -> str:
        """Return the record as a single JSON line without trailing newline."""
        return _encoder.encode(self.as_dict()).decode("utf-8")

    @classmethod
    def from_dict(cls, document: dict) -> "CatalogRecord":
        """Create a record from a decoded document.

        Raises
        ------
        InvalidRecordError
            If the document is not a mapping of exactly the record fields
            or if the origin is empty.
        """
        if not isinstance(document, dict):
            raise InvalidRecordError(f"record must be an object, got: {document!r}")
        try:
            record = cls(**document)
        except TypeError as error:
            raise InvalidRecordError(f"invalid record {document!r}: {error}") from error
        if not record.origin:
            raise InvalidRecordError(f"invalid record {document!r}: origin must not be empty")
        return record

    @classmethod
    def from_json(cls, line: str | bytes) -> "CatalogRecord":
        """Decode a record from one JSON line."""
        try:
            document = _decoder.decode(line)
        except msgspec.DecodeError as error:
            raise InvalidRecordError(f"invalid json: {error}") from error
        return cls.from_dict(document)
