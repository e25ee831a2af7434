# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the diagnostic log sink."""

import io
import re
import threading

import pytest

from genro_multitree import (
    InvariantViolationError,
    MultiTree,
    Severity,
    configure_logging,
    log,
    log_if,
    log_value,
    reset_logging,
)
from genro_multitree.log import clamp

LINE = re.compile(
    r"^\[\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2},\d{3}\] \[(?P<level>\w+)\] "
    r"at (?P<site>\S+) in thread (?P<thread>.+?): (?P<message>.*)$"
)


@pytest.fixture
def sink():
    """Collector sink installed for the duration of a test."""
    stream = io.StringIO()
    configure_logging(stream)
    yield stream
    reset_logging()


def parsed(stream):
    return [LINE.match(line) for line in stream.getvalue().splitlines()]


class TestSeverity:
    """Tests for severity clamping."""

    @pytest.mark.parametrize('level, expected', [
        (-5, Severity.DEBUG),
        (0, Severity.DEBUG),
        (2, Severity.WARN),
        (4, Severity.FATAL),
        (99, Severity.FATAL),
    ])
    def test_clamp(self, level, expected):
        """Test out-of-range levels are brought into range."""
        assert clamp(level) is expected


class TestLog:
    """Tests for log, log_if and log_value."""

    def test_line_format(self, sink):
        """Test timestamp, level, call-site, thread and message."""
        log('hello', Severity.INFO)
        (match,) = parsed(sink)
        assert match is not None
        assert match['level'] == 'INFO'
        assert ':test_line_format:' in match['site']
        assert match['thread'] == threading.current_thread().name
        assert match['message'] == 'hello'

    @pytest.mark.parametrize('severity, name', [
        (Severity.DEBUG, 'DEBUG'),
        (Severity.WARN, 'WARN'),
        (Severity.ERROR, 'ERROR'),
        (Severity.FATAL, 'FATAL'),
        (42, 'FATAL'),
        (-1, 'DEBUG'),
    ])
    def test_level_names(self, sink, severity, name):
        """Test level names, including clamped levels."""
        log('msg', severity)
        (match,) = parsed(sink)
        assert match['level'] == name

    def test_braces_kept(self, sink):
        """Test messages are not treated as format strings."""
        log('{not a field}', Severity.INFO)
        (match,) = parsed(sink)
        assert match['message'] == '{not a field}'

    def test_log_if(self, sink):
        """Test conditional logging."""
        log_if('skipped', Severity.INFO, False)
        log_if('written', Severity.WARN, True)
        messages = [match['message'] for match in parsed(sink)]
        assert messages == ['written']

    def test_log_value(self, sink):
        """Test logging a variable with and without its type."""
        log_value(42)
        log_value('raw', describe=False)
        first, second = parsed(sink)
        assert first['level'] == 'DEBUG'
        assert first['message'] == "variable of <class 'int'> = 42"
        assert second['message'] == 'raw'

    def test_threshold(self):
        """Test records below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(stream, level=Severity.ERROR)
        try:
            log('quiet', Severity.WARN)
            log('loud', Severity.ERROR)
        finally:
            reset_logging()
        assert [match['message'] for match in parsed(stream)] == ['loud']


class TestSinks:
    """Tests for sink configuration."""

    def test_duplicate_sinks_written_once(self):
        """Test a sink given twice receives one line per record."""
        stream = io.StringIO()
        ids = configure_logging(stream, stream)
        try:
            log('once', Severity.INFO)
        finally:
            reset_logging()
        assert len(ids) == 1
        assert len(stream.getvalue().splitlines()) == 1

    def test_multiple_sinks(self):
        """Test every distinct sink receives the line."""
        first, second = io.StringIO(), io.StringIO()
        configure_logging(first, second)
        try:
            log('both', Severity.INFO)
        finally:
            reset_logging()
        assert first.getvalue() == second.getvalue() != ''

    def test_byte_sink(self):
        """Test binary streams receive UTF-8 encoded lines."""
        stream = io.BytesIO()
        configure_logging(stream)
        try:
            log('ünïcode │', Severity.INFO)
        finally:
            reset_logging()
        text = stream.getvalue().decode('utf-8')
        assert text.rstrip('\n').endswith(': ünïcode │')

    def test_reconfigure_replaces(self):
        """Test configure_logging drops the previous sinks."""
        old, new = io.StringIO(), io.StringIO()
        configure_logging(old)
        configure_logging(new)
        try:
            log('latest', Severity.INFO)
        finally:
            reset_logging()
        assert old.getvalue() == ''
        assert 'latest' in new.getvalue()

    def test_only_configured_sinks(self, capfd):
        """Test nothing reaches loguru's default stderr handler."""
        stream = io.StringIO()
        configure_logging(stream)
        try:
            log('hello', Severity.INFO)
            MultiTree('root').insert('a')
        finally:
            reset_logging()
        captured = capfd.readouterr()
        assert captured.err == ''
        assert captured.out == ''
        assert [match['message'] for match in parsed(stream)] == [
            'hello', "Inserted ['a'] under 'root'"
        ]

    def test_reset_stops_output(self):
        """Test nothing is written after reset_logging."""
        stream = io.StringIO()
        configure_logging(stream)
        reset_logging()
        log('late', Severity.FATAL)
        assert stream.getvalue() == ''


class TestLibraryRecords:
    """Tests for records emitted by MultiTree itself."""

    def test_insert_logged(self, sink):
        """Test insertions are reported at DEBUG level."""
        tree = MultiTree('root')
        tree.insert('a', 'b')
        (match,) = parsed(sink)
        assert match['level'] == 'DEBUG'
        assert match['site'].startswith('genro_multitree.node:insert_nodes:')
        assert match['message'] == "Inserted ['a', 'b'] under 'root'"

    def test_deep_search_logged(self, sink):
        """Test deep search results are reported."""
        tree = MultiTree('root')
        (a,) = tree.insert('a')
        a.insert('x')
        tree.deep_search('x')
        tree.deep_search('y')
        messages = [match['message'] for match in parsed(sink)][-2:]
        assert messages == [
            "Deep search for 'x' from 'root' matched at depth 2",
            "Deep search for 'y' from 'root' found nothing",
        ]

    def test_invariant_violation_logged(self, sink):
        """Test the consistency fault is reported before raising."""
        tree = MultiTree('root')
        tree.insert('a')
        tree._children.append(MultiTree('a'))
        with pytest.raises(InvariantViolationError):
            tree.deep_search('a')
        assert parsed(sink)[-1]['level'] == 'ERROR'

    def test_silent_without_configuration(self, capsys):
        """Test the library writes nothing unless enabled."""
        tree = MultiTree('root')
        tree.insert('a')
        tree.deep_search('a')
        captured = capsys.readouterr()
        assert captured.out == ''
        assert captured.err == ''
