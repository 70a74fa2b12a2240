# pylint: disable=missing-docstring
from .record import CatalogRecord, InvalidRecordError
