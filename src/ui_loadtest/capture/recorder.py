"""
Records the console messages captured by every session to a YAML file.

Debug aid for working out which console output the application produces
around the measured transition.
"""
import yaml
from pathlib import Path
from typing import Dict, List, Any
from dataclasses import dataclass, asdict
from datetime import datetime, timezone

from .buffer import CaptureBuffer


@dataclass
class RecordedMessage:
    """A console message tagged with the session that saw it."""

    session_index: int
    sequence: int
    timestamp_ms: float
    text: str


class ConsoleRecorder:
    """
    Collects captured console messages per session and saves them as YAML.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._messages: Dict[int, List[RecordedMessage]] = {}

    def record_buffer(self, session_index: int, buffer: CaptureBuffer):
        """Snapshot the current contents of a session's buffer."""
        recorded = self._messages.setdefault(session_index, [])
        for message in buffer.messages:
            recorded.append(
                RecordedMessage(
                    session_index=session_index,
                    sequence=len(recorded) + 1,
                    timestamp_ms=message.timestamp_ms,
                    text=message.text,
                )
            )

    def save(self, filename: str = "console_messages.yaml") -> Path:
        """Save all recorded messages to a YAML file."""
        output_path = self.output_dir / filename

        sessions: List[Dict[str, Any]] = []
        for index in sorted(self._messages):
            sessions.append(
                {
                    "session_index": index,
                    "total_messages": len(self._messages[index]),
                    "messages": [asdict(m) for m in self._messages[index]],
                }
            )

        data = {
            "recorded_at": datetime.now(timezone.utc).isoformat(),
            "total_messages": self.get_message_count(),
            "sessions": sessions,
        }

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
                width=120,
            )

        return output_path

    def get_message_count(self) -> int:
        """Total number of recorded messages across sessions."""
        return sum(len(messages) for messages in self._messages.values())
