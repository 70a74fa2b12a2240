"""
Dry Run
-------
Filter rules can be tested by executing them in a dry run of catalogprep.
The dry run takes a path to a JSON lines file with catalog records, evaluates every record with
the filter rules of the configuration and prints the outcome to the console:

* rewritten records are shown as a diff of the changed fields
* discarded records are shown with the matching field and pattern

..  code-block:: bash
    :caption: Directly with Python

    catalogprep test dry-run $CONFIG $RECORDS
"""

import logging
from difflib import ndiff
from functools import cached_property
from typing import List

from attrs import evolve
from colorama import Back, Fore

from catalogprep.catalog.record import CatalogRecord, InvalidRecordError
from catalogprep.filter.chain import FilterChain
from catalogprep.filter.result import Discard, Forward
from catalogprep.util.configuration import Configuration
from catalogprep.util.helper import color_print_line, color_print_title


class _RecordCollector:
    """Outbound sink keeping forwarded records in memory."""

    def __init__(self):
        self.records: List[CatalogRecord] = []

    def put(self, record: CatalogRecord) -> None:
        self.records.append(record)


class DryRunner:
    """Used to run a filter chain with given records and show the changes made by filtering."""

    @cached_property
    def _chain(self) -> FilterChain:
        return FilterChain(self._config.filters, self._collector, name="dry_run")

    def __init__(self, input_file_path: str, config: Configuration):
        self._input_file_path = input_file_path
        self._config = config
        self._collector = _RecordCollector()
        self._logger = logging.getLogger("DryRunner")

    def _records(self):
        with open(self._input_file_path, "r", encoding="utf8") as input_file:
            for line_number, line in enumerate(input_file, start=1):
                if not line.strip():
                    continue
                try:
                    yield CatalogRecord.from_json(line)
                except InvalidRecordError as error:
                    color_print_line(Back.BLACK, Fore.YELLOW, f"line {line_number}: {error}")

    def run(self) -> dict:
        """Run the dry runner and return the counts of the outcomes."""
        counts = {"total": 0, "forwarded": 0, "rewritten": 0, "discarded": 0}
        for record in self._records():
            counts["total"] += 1
            original = evolve(record)
            match self._chain.process(record):
                case Forward(forwarded):
                    counts["forwarded"] += 1
                    if forwarded != original:
                        counts["rewritten"] += 1
                        color_print_title(Back.CYAN, "REWRITTEN RECORD")
                        self._print_ndiff_items(self._diff(original, forwarded))
                case Discard(discarded, matched_field, pattern):
                    counts["discarded"] += 1
                    color_print_title(Back.RED, "DISCARDED RECORD")
                    color_print_line(Back.BLACK, Fore.RED, discarded.to_json())
                    color_print_line(
                        Back.BLACK, Fore.RED, f"{matched_field} matches `{pattern}' pattern"
                    )
        color_print_title(
            Back.WHITE,
            f"FORWARDED RECORDS: {counts['forwarded']}/{counts['total']}, "
            f"REWRITTEN: {counts['rewritten']}, DISCARDED: {counts['discarded']}",
        )
        self._logger.debug("dry run finished with %s", counts)
        return counts

    @staticmethod
    def _diff(original: CatalogRecord, forwarded: CatalogRecord):
        before = [f"{key}: {value}" for key, value in original.as_dict().items()]
        after = [f"{key}: {value}" for key, value in forwarded.as_dict().items()]
        return ndiff(before, after)

    @staticmethod
    def _print_ndiff_items(diff):
        """
        Print the results from the ndiff library with colored lines, depending on the diff type
        """
        for item in diff:
            if item.startswith("- "):
                color_print_line(Back.BLACK, Fore.RED, item)
            elif item.startswith("+ "):
                color_print_line(Back.BLACK, Fore.GREEN, item)
            elif item.startswith("? "):
                color_print_line(Back.BLACK, Fore.WHITE, item)
            else:
                color_print_line(Back.BLACK, Fore.CYAN, item)
