"""
Unit tests for progress monitors.
"""

import logging

import pytest

from collage_toolkit.builder.components.monitor import LogProgressMonitor, SilentProgressMonitor
from collage_toolkit.core.errors import MonitorError, ParseParameterError


class TestLogProgressMonitor:
    """Tests for LogProgressMonitor."""

    def test_report_when_parsed_then_logs_numbered_stages(self, registered_params, caplog):
        """Each report is logged with a running count."""
        # Arrange
        monitor = LogProgressMonitor()
        monitor.parse_custom_parameters(registered_params)

        # Act
        with caplog.at_level(logging.INFO, logger="collage_toolkit"):
            monitor.report("Parsing", registered_params)
            monitor.report("Reading", registered_params)
            monitor.report("Done", registered_params)

        # Assert
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0].startswith("[1] Parsing")
        assert messages[1].startswith("[2] Reading")
        assert messages[2].startswith("Collage finished in")

    def test_report_when_level_debug_then_hidden_at_info(self, registered_params, caplog):
        """progress-level controls the log level of reports."""
        monitor = LogProgressMonitor()
        registered_params.set_option_value("progress-level", "debug")
        monitor.parse_custom_parameters(registered_params)

        with caplog.at_level(logging.INFO, logger="collage_toolkit"):
            monitor.report("Reading", registered_params)

        assert caplog.records == []

    def test_report_when_not_parsed_then_raises_monitor_error(self, registered_params):
        """Reporting before parsing is a monitor failure."""
        with pytest.raises(MonitorError):
            LogProgressMonitor().report("Parsing", registered_params)

    def test_parse_when_level_unknown_then_raises_parse_parameter_error(self, registered_params):
        """Only DEBUG, INFO and WARNING are accepted."""
        registered_params.set_option_value("progress-level", "LOUD")

        with pytest.raises(ParseParameterError, match="--progress-level"):
            LogProgressMonitor().parse_custom_parameters(registered_params)


class TestSilentProgressMonitor:
    """Tests for SilentProgressMonitor."""

    def test_report_when_called_then_nothing_logged(self, registered_params, caplog):
        """The silent monitor accepts every report quietly."""
        with caplog.at_level(logging.DEBUG):
            SilentProgressMonitor().report("Reading", registered_params)

        assert caplog.records == []
