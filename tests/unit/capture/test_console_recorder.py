"""
Unit tests for ConsoleRecorder YAML output.
"""

import yaml

from ui_loadtest.capture import CaptureBuffer, ConsoleRecorder


def test_save_writes_messages_grouped_by_session(tmp_path):
    first, second = CaptureBuffer(), CaptureBuffer()
    first.append("boot", timestamp_ms=1)
    first.append("FORM_READY", timestamp_ms=2)
    second.append("boot", timestamp_ms=3)

    recorder = ConsoleRecorder(tmp_path / "out")
    recorder.record_buffer(1, second)
    recorder.record_buffer(0, first)

    path = recorder.save()

    assert path == tmp_path / "out" / "console_messages.yaml"
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["total_messages"] == 3
    assert [s["session_index"] for s in data["sessions"]] == [0, 1]
    assert [m["text"] for m in data["sessions"][0]["messages"]] == ["boot", "FORM_READY"]
    assert [m["sequence"] for m in data["sessions"][0]["messages"]] == [1, 2]


def test_empty_recorder_saves_empty_document(tmp_path):
    recorder = ConsoleRecorder(tmp_path)
    path = recorder.save("empty.yaml")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["total_messages"] == 0
    assert data["sessions"] == []
    assert recorder.get_message_count() == 0
