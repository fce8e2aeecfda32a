"""
Unit tests for the per-session CaptureBuffer.
"""

import asyncio

import pytest

from ui_loadtest.capture import CaptureBuffer
from ui_loadtest.race import DetectionMethod, poll_capture_buffer, race_signals


class TestCaptureBufferBasics:

    def test_append_keeps_order_and_timestamps(self):
        buffer = CaptureBuffer()
        buffer.append("first", timestamp_ms=10)
        buffer.append("second", timestamp_ms=20)

        assert [m.text for m in buffer.messages] == ["first", "second"]
        assert [m.timestamp_ms for m in buffer.messages] == [10, 20]
        assert len(buffer) == 2

    def test_append_defaults_timestamp_to_now(self):
        buffer = CaptureBuffer()
        message = buffer.append("hello")
        assert message.timestamp_ms > 0

    def test_find_first_matching_uses_substring_and_returns_oldest(self):
        buffer = CaptureBuffer()
        buffer.append("loading", timestamp_ms=1)
        buffer.append("app: FORM_READY id=1", timestamp_ms=2)
        buffer.append("FORM_READY again", timestamp_ms=3)

        match = buffer.find_first_matching("FORM_READY")
        assert match is not None
        assert match.timestamp_ms == 2

    def test_find_first_matching_returns_none_without_match(self):
        buffer = CaptureBuffer()
        buffer.append("nothing here")
        assert buffer.find_first_matching("FORM_READY") is None

    def test_clear_empties_buffer(self):
        buffer = CaptureBuffer()
        buffer.append("FORM_READY")
        buffer.clear()

        assert len(buffer) == 0
        assert buffer.find_first_matching("FORM_READY") is None

    def test_messages_returns_a_copy(self):
        buffer = CaptureBuffer()
        buffer.append("a")
        snapshot = buffer.messages
        snapshot.clear()
        assert len(buffer) == 1

    def test_attach_subscribes_to_console_events(self, fake_page):
        buffer = CaptureBuffer()
        buffer.attach(fake_page)

        fake_page.emit_console("FORM_READY")

        assert [m.text for m in buffer.messages] == ["FORM_READY"]

    def test_buffers_are_not_shared_between_pages(self, fakes):
        page_a, page_b = fakes.Page(), fakes.Page()
        buffer_a, buffer_b = CaptureBuffer(), CaptureBuffer()
        buffer_a.attach(page_a)
        buffer_b.attach(page_b)

        page_a.emit_console("only for a")

        assert len(buffer_a) == 1
        assert len(buffer_b) == 0


class TestMeasurementWindow:
    """A race started after clear() must only see messages that arrive after it."""

    @pytest.mark.asyncio
    async def test_message_after_clear_is_detected(self, fake_page):
        buffer = CaptureBuffer()
        buffer.attach(fake_page)

        buffer.clear()
        fake_page.emit_console_later("FORM_READY", delay=0.02)

        outcome = await race_signals(
            [lambda: poll_capture_buffer(buffer, "FORM_READY", interval_ms=5, timeout_ms=500)],
            deadline_ms=500,
        )

        assert outcome is not None
        assert outcome.method == DetectionMethod.LOG

    @pytest.mark.asyncio
    async def test_message_before_clear_is_not_detected(self, fake_page):
        buffer = CaptureBuffer()
        buffer.attach(fake_page)

        fake_page.emit_console("FORM_READY")
        buffer.clear()

        outcome = await race_signals(
            [lambda: poll_capture_buffer(buffer, "FORM_READY", interval_ms=5, timeout_ms=100)],
            deadline_ms=100,
        )

        assert outcome is None
