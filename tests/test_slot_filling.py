"""
Slot-Filling Engine Tests
-------------------------
COLLECTING vs READY and the minimal outstanding field list.
"""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.slot_filling import SlotFillingEngine
from core.state_machine import DialogState

from conftest import make_book_appointment, make_create_user


class TestSlotFilling:

    def setup_method(self):
        self.engine = SlotFillingEngine()

    def test_all_missing_in_declared_order(self):
        result = self.engine.evaluate(make_book_appointment(), {})

        assert result.state == DialogState.COLLECTING
        assert [p.name for p in result.missing] == ["service", "date"]

    def test_only_invalid_fields_reported(self):
        result = self.engine.evaluate(
            make_book_appointment(),
            {"service": "toyota limited", "date": "next week thursday"},
        )

        assert [p.name for p in result.missing] == ["date"]
        assert "YYYY-MM-DD" in result.problems["date"]

    def test_ready(self):
        result = self.engine.evaluate(
            make_book_appointment(),
            {"service": "toyota limited", "date": "2026-01-08"},
        )

        assert result.is_ready
        assert result.missing == []
        assert result.values == {"service": "toyota limited", "date": "2026-01-08"}

    def test_none_values(self):
        result = self.engine.evaluate(make_book_appointment(), None)
        assert result.state == DialogState.COLLECTING

    def test_whitespace_string_is_missing(self):
        result = self.engine.evaluate(make_create_user(), {"fullName": "   ", "age": 30})

        assert [p.name for p in result.missing] == ["fullName"]
        assert result.problems["fullName"] == "fullName is required"

    def test_optional_never_blocks(self):
        result = self.engine.evaluate(make_create_user(), {"fullName": "Ada", "age": 30})
        assert result.is_ready

    def test_invalid_optional_is_dropped(self):
        result = self.engine.evaluate(
            make_create_user(),
            {"fullName": "Ada", "age": 30, "nickname": 7},
        )

        assert result.is_ready
        assert "nickname" not in result.values

    def test_unknown_keys_pass_through(self):
        result = self.engine.evaluate(
            make_create_user(),
            {"fullName": "Ada", "age": 30, "source": "signup-page"},
        )

        assert result.values["source"] == "signup-page"
