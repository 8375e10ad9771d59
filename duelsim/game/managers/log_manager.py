"""
Diagnostic log for the duel engine.

The engine and its managers publish LogMessage events; the LogManager files
them under a category, keeps the most recent ones and can dump them to a
timestamped file. The short player-facing battle log lives in BattleLog.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events.events import EventType, LogMessage as LogEvent

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # Engine lifecycle, configuration, selection
    BATTLE = auto()     # Swings, hits, verdicts
    TIMER = auto()      # Countdown and run loop
    DEBUG = auto()      # Phase bookkeeping
    WARNING = auto()    # Rejected calls
    ERROR = auto()      # Subscriber failures, unwritable log files


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.TIMER: "TMR",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


CATEGORY_LEVELS = {
    LogCategory.DEBUG: LogLevel.DEBUG,
    LogCategory.TIMER: LogLevel.DEBUG,
    LogCategory.WARNING: LogLevel.WARNING,
    LogCategory.ERROR: LogLevel.ERROR,
}


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def level(self) -> LogLevel:
        return CATEGORY_LEVELS.get(self.category, LogLevel.INFO)

    def format(self, include_timestamp: bool = False) -> str:
        """Format the message as ``[time] [TAG] text``."""
        tag = f"[{CATEGORY_TAGS[self.category]}] {self.text}"
        if include_timestamp:
            return f"[{self.timestamp.strftime('%H:%M:%S.%f')[:-3]}] {tag}"
        return tag


class LogManager:
    """Collects the engine's diagnostic messages."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager and subscribe to LogMessage events.

        Args:
            event_manager: Event bus carrying LogMessage events
            max_messages: Maximum number of messages to keep
            level: Minimum level returned by get_messages()
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.level = level
        self.event_manager = event_manager
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )

    def detach(self) -> None:
        """Stop receiving LogMessage events."""
        self.event_manager.unsubscribe(EventType.LOG_MESSAGE, self._handle_log_message_event)

    def _handle_log_message_event(self, event: LogEvent) -> None:
        level = (event.level or "").upper()
        if level in ("WARNING", "ERROR"):
            category = LogCategory[level]
        elif level == "DEBUG":
            category = LogCategory.DEBUG
        else:
            try:
                category = LogCategory[event.category.upper()]
            except (KeyError, AttributeError):
                category = LogCategory.SYSTEM

        self.log(f"[{event.source}] {event.message}", category)

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        self.messages.append(LogEntry(text=text, category=category))

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def get_messages(self, count: Optional[int] = None) -> list[LogEntry]:
        """Recent messages at or above the manager's level, oldest first.

        Args:
            count: Maximum number of messages to return (None for all)
        """
        visible = [msg for msg in self.messages if msg.level.value >= self.level.value]
        if count is not None and count < len(visible):
            return visible[-count:]
        return visible

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save every kept message, whatever its level, to a timestamped file.

        Args:
            log_dir: Directory to write into (created if missing)

        Returns:
            Path of the written file, or None if writing failed
        """
        now = datetime.now()
        filepath = os.path.join(log_dir, f"duel_{now.strftime('%Y%m%d_%H%M%S')}.log")

        try:
            os.makedirs(log_dir, exist_ok=True)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Duel Simulation - Engine Log\n")
                f.write(f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    f.write(msg.format(include_timestamp=True) + "\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.log(f"Engine log saved to {filepath}")
        return filepath
