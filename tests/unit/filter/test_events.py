# pylint: disable=missing-docstring
import logging
from unittest import mock

import pytest

from catalogprep.filter.events import EventKind, FilterEvent, LoggingObserver


class TestFilterEvent:
    def test_render_formats_message(self):
        event = FilterEvent(
            kind=EventKind.INVALID_RULE,
            level=logging.ERROR,
            message="%s: %s, discarding rule %d",
            args=("FilterChain (test)", "no pattern defined", 3),
        )
        assert event.render() == "FilterChain (test): no pattern defined, discarding rule 3"

    def test_render_without_args_keeps_percent_signs(self):
        event = FilterEvent(kind=EventKind.DISCARD, level=logging.DEBUG, message="100%")
        assert event.render() == "100%"

    def test_context_defaults_to_empty_dict(self):
        event = FilterEvent(kind=EventKind.DISCARD, level=logging.DEBUG, message="m")
        assert event.context == {}
        assert event.args == ()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"kind": "discard", "level": logging.DEBUG, "message": "m"},
            {"kind": EventKind.DISCARD, "level": "DEBUG", "message": "m"},
            {"kind": EventKind.DISCARD, "level": logging.DEBUG, "message": None},
            {"kind": EventKind.DISCARD, "level": logging.DEBUG, "message": "m", "args": ["a"]},
        ],
    )
    def test_invalid_events_raise(self, kwargs):
        with pytest.raises(TypeError):
            FilterEvent(**kwargs)

    def test_event_kind_values(self):
        assert [kind.value for kind in EventKind] == [
            "unknown_target",
            "invalid_rule",
            "invalid_pattern",
            "discard",
        ]


class TestLoggingObserver:
    def test_logs_event_on_its_level(self, caplog):
        observer = LoggingObserver()
        event = FilterEvent(
            kind=EventKind.INVALID_PATTERN,
            level=logging.WARNING,
            message="unable to compile %s",
            args=("(",),
        )
        with caplog.at_level(logging.WARNING, logger="FilterChain"):
            observer(event)
        assert len(caplog.records) == 1
        log_record = caplog.records[0]
        assert log_record.name == "FilterChain"
        assert log_record.levelno == logging.WARNING
        assert log_record.getMessage() == "unable to compile ("
        assert log_record.filter_event == "invalid_pattern"

    def test_skips_disabled_levels(self):
        event_logger = mock.MagicMock()
        event_logger.isEnabledFor.return_value = False
        observer = LoggingObserver(event_logger)
        observer(FilterEvent(kind=EventKind.DISCARD, level=logging.DEBUG, message="m"))
        event_logger.isEnabledFor.assert_called_once_with(logging.DEBUG)
        event_logger.log.assert_not_called()

    def test_uses_given_logger(self):
        event_logger = mock.MagicMock()
        observer = LoggingObserver(event_logger)
        observer(
            FilterEvent(kind=EventKind.DISCARD, level=logging.DEBUG, message="m %s", args=("a",))
        )
        event_logger.log.assert_called_once_with(
            logging.DEBUG, "m %s", "a", extra={"filter_event": "discard"}
        )
