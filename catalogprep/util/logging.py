"""helper classes for catalogprep logging"""

import logging
from socket import gethostname


class CatalogprepFormatter(logging.Formatter):
    """
    A custom formatter for catalogprep logging with additional attributes.

    The available attributes are listed in the
    `python documentation <https://docs.python.org/3/library/logging.html#logrecord-attributes>`_ .
    Additionally, the formatter provides the following catalogprep specific attributes:

    .. table::

        +-----------------------+--------------------------------------------------+
        | attribute             | description                                      |
        +=======================+==================================================+
        | %(hostname)           | The hostname of the machine where the log was    |
        |                       | emitted                                          |
        +-----------------------+--------------------------------------------------+
        | %(filter_event)       | The kind of the filter event which was logged or |
        |                       | :code:`-` for other log records                  |
        +-----------------------+--------------------------------------------------+

    """

    def format(self, record):
        record.hostname = gethostname()
        if not hasattr(record, "filter_event"):
            record.filter_event = "-"
        return super().format(record)
