"""
Unit tests for the diagnostic log manager.
"""

from unittest.mock import patch

import pytest

from duelsim.core.events.events import LogMessage
from duelsim.game.managers.log_manager import LogCategory, LogEntry, LogLevel, LogManager


@pytest.fixture
def log_manager(event_manager):
    return LogManager(event_manager)


def _deliver(event_manager, message, category="SYSTEM", level="INFO", source="test"):
    event_manager.publish(
        LogMessage(tick=0, message=message, category=category, level=level, source=source)
    )
    event_manager.process_events()


class TestLogEntry:

    def test_format_with_category(self):
        entry = LogEntry("Fight!", LogCategory.BATTLE)
        assert entry.format() == "[BTL] Fight!"

    def test_format_with_timestamp(self):
        entry = LogEntry("Countdown started", LogCategory.TIMER)
        text = entry.format(include_timestamp=True)
        assert text.startswith("[")
        assert text.endswith("[TMR] Countdown started")

    def test_level_follows_category(self):
        assert LogEntry("x", LogCategory.BATTLE).level == LogLevel.INFO
        assert LogEntry("x", LogCategory.TIMER).level == LogLevel.DEBUG
        assert LogEntry("x", LogCategory.WARNING).level == LogLevel.WARNING


class TestLogManager:
    """Test event-driven logging and level filtering."""

    def test_log_message_event(self, log_manager, event_manager):
        _deliver(event_manager, "Selected", source="BattleEngine")

        entry = log_manager.messages[-1]
        assert entry.text == "[BattleEngine] Selected"
        assert entry.category == LogCategory.SYSTEM

    def test_warning_level_overrides_category(self, log_manager, event_manager):
        _deliver(event_manager, "Rejected", category="BATTLE", level="WARNING")
        assert log_manager.messages[-1].category == LogCategory.WARNING

    def test_debug_level_files_under_debug(self, log_manager, event_manager):
        _deliver(event_manager, "phase moved", level="DEBUG")
        assert log_manager.messages[-1].category == LogCategory.DEBUG

    def test_unknown_category_falls_back(self, log_manager, event_manager):
        _deliver(event_manager, "odd", category="WEATHER")
        assert log_manager.messages[-1].category == LogCategory.SYSTEM

    def test_level_filtering(self, event_manager):
        manager = LogManager(event_manager)
        manager.log("hit", LogCategory.BATTLE)
        manager.log("phase moved", LogCategory.DEBUG)
        manager.log("countdown", LogCategory.TIMER)
        manager.log("Rejected start", LogCategory.WARNING)

        assert [m.text for m in manager.get_messages()] == ["hit", "Rejected start"]

        verbose = LogManager(event_manager, level=LogLevel.DEBUG)
        for entry in manager.messages:
            verbose.log(entry.text, entry.category)
        assert len(verbose.get_messages()) == 4

    def test_count_keeps_most_recent(self, log_manager):
        for i in range(5):
            log_manager.log(f"hit {i}", LogCategory.BATTLE)

        assert [m.text for m in log_manager.get_messages(count=2)] == ["hit 3", "hit 4"]

    def test_buffer_is_bounded(self, event_manager):
        manager = LogManager(event_manager, max_messages=3)
        for i in range(10):
            manager.log(str(i))
        assert [m.text for m in manager.messages] == ["7", "8", "9"]

    def test_detach_stops_collection(self, log_manager, event_manager):
        log_manager.detach()
        _deliver(event_manager, "after detach")
        assert len(log_manager.messages) == 0

    def test_save_log_to_file(self, log_manager, tmp_path):
        log_manager.log("Swordsman deals 12 damage to Archer!", LogCategory.BATTLE)
        log_manager.log("phase moved", LogCategory.DEBUG)

        path = log_manager.save_log_to_file(str(tmp_path / "logs"))

        assert path is not None
        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert "[BTL] Swordsman deals 12 damage to Archer!" in content
        assert "[DBG] phase moved" in content
        assert log_manager.messages[-1].text.startswith("Engine log saved to")

    def test_save_log_failure_returns_none(self, log_manager, tmp_path):
        with patch("builtins.open", side_effect=OSError("disk full")):
            assert log_manager.save_log_to_file(str(tmp_path)) is None
        assert log_manager.messages[-1].category == LogCategory.ERROR
