"""Tests for the consume-once handoff channel."""

from __future__ import annotations

import logging

from flashfind.application.search.channel import VOICE_RESULTS_KEY, HandoffBoard, HandoffSlot


class TestHandoffSlot:
    def test_take_consumes(self):
        slot: HandoffSlot[list[str]] = HandoffSlot("test")
        slot.put(["a.jpg", "b.jpg"])
        assert slot.take() == ["a.jpg", "b.jpg"]
        assert slot.take() is None
        assert slot.is_empty

    def test_empty_take(self):
        assert HandoffSlot("test").take() is None

    def test_empty_list_is_a_value(self):
        slot: HandoffSlot[list[str]] = HandoffSlot("test")
        slot.put([])
        assert not slot.is_empty
        assert slot.take() == []

    def test_overwrite_warns(self, caplog):
        slot: HandoffSlot[int] = HandoffSlot("test")
        slot.put(1)
        with caplog.at_level(logging.WARNING):
            slot.put(2)
        assert slot.take() == 2
        assert "overwritten" in caplog.text


class TestHandoffBoard:
    def test_same_slot_per_name(self):
        board = HandoffBoard()
        assert board.slot("x") is board.slot("x")
        assert board.voice_results() is board.slot(VOICE_RESULTS_KEY)

    def test_slots_are_independent(self):
        board = HandoffBoard()
        board.slot("x").put(1)
        assert board.slot("y").take() is None
        assert board.slot("x").take() == 1
