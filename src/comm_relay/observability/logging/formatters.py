"""Final structlog renderers for dispatch logs."""

import json
from datetime import UTC, datetime
from typing import Any

from colorama import Fore, Style, init

init(autoreset=True)

# Keys rendered in fixed positions rather than as trailing key=value pairs.
_HEADER_KEYS = ("timestamp", "level", "logger", "correlation_id", "event")


def _extra_fields(event_dict: dict[str, Any]) -> list[tuple[str, Any]]:
    fields = []
    for key, value in event_dict.items():
        if key in _HEADER_KEYS:
            continue
        if isinstance(value, dict | list | tuple):
            value = json.dumps(value, default=str)
        fields.append((key, value))
    return fields


class JSONFormatter:
    """Render each event as one JSON object."""

    def __init__(self, ensure_ascii: bool = False, indent: int | None = None):
        self.ensure_ascii = ensure_ascii
        self.indent = indent

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        event_dict.setdefault("timestamp", datetime.now(UTC).isoformat())
        event_dict["level"] = method_name.upper()
        if "logger" not in event_dict and getattr(logger, "name", None):
            event_dict["logger"] = logger.name

        return json.dumps(
            event_dict, ensure_ascii=self.ensure_ascii, indent=self.indent, default=str
        )


class ConsoleFormatter:
    """Human-readable single-line output, optionally coloured."""

    LEVEL_COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def __init__(self, colors: bool = True, show_timestamp: bool = True):
        self.colors = colors
        self.show_timestamp = show_timestamp

    def _paint(self, text: str, color: str) -> str:
        if not self.colors:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        parts = []

        if self.show_timestamp and "timestamp" in event_dict:
            parts.append(f"[{event_dict['timestamp']}]")

        level = method_name.upper()
        parts.append(self._paint(level, self.LEVEL_COLORS.get(level, "")))

        if "logger" in event_dict:
            parts.append(self._paint(f"[{event_dict['logger']}]", Fore.BLUE))
        if "correlation_id" in event_dict:
            parts.append(self._paint(f"[{event_dict['correlation_id']}]", Fore.MAGENTA))

        if event_dict.get("event"):
            parts.append(str(event_dict["event"]))

        extras = ", ".join(f"{k}={v}" for k, v in _extra_fields(event_dict))
        if extras:
            parts.append(self._paint(extras, Fore.WHITE))

        return " ".join(parts)


class StructuredFormatter:
    """Flat ``key=value`` pairs joined by a separator."""

    def __init__(self, separator: str = " | ", key_value_separator: str = "="):
        self.separator = separator
        self.key_value_separator = key_value_separator

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        kv = self.key_value_separator
        pairs: list[tuple[str, Any]] = []

        if "timestamp" in event_dict:
            pairs.append(("timestamp", event_dict["timestamp"]))
        pairs.append(("level", method_name.upper()))
        for key in ("logger", "correlation_id"):
            if key in event_dict:
                pairs.append((key, event_dict[key]))
        if "event" in event_dict:
            pairs.append(("message", event_dict["event"]))
        pairs.extend(_extra_fields(event_dict))

        return self.separator.join(f"{key}{kv}{value}" for key, value in pairs)
