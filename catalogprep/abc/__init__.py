# pylint: disable=missing-docstring
from .exceptions import CatalogprepException
