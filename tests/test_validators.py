"""
Parameter Validator Tests
-------------------------
One predicate per parameter type, applied to values as received.
"""

import io
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from commands.models import (
    Command, DateParameter, FileDelivery, FileParameter, NumberParameter,
    SelectOption, SelectParameter, StringParameter,
)
from commands.validators import (
    describe_problem, is_missing, validate_command, validate_parameter,
)


async def _supplier():
    return [SelectOption(label="A", value="a")]


class TestMissingValues:

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, False, "x", [], 0.0])
    def test_present(self, value):
        assert not is_missing(value)

    def test_missing_is_invalid_for_every_type(self):
        for param in (
            StringParameter(name="s"),
            NumberParameter(name="n"),
            DateParameter(name="d"),
            SelectParameter(name="o", options=[SelectOption("A", "a")]),
            FileParameter(name="f"),
        ):
            assert not validate_parameter(param, None)
            assert not validate_parameter(param, "  ")


class TestStringValidation:

    def test_non_empty_string(self):
        assert validate_parameter(StringParameter(name="service"), "toyota limited")

    def test_non_string_rejected(self):
        assert not validate_parameter(StringParameter(name="service"), 42)


class TestNumberValidation:

    def test_int_and_float(self):
        param = NumberParameter(name="age")
        assert validate_parameter(param, 30)
        assert validate_parameter(param, 30.5)

    def test_numeric_string_rejected(self):
        assert not validate_parameter(NumberParameter(name="age"), "30")

    def test_bool_rejected(self):
        assert not validate_parameter(NumberParameter(name="age"), True)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, value):
        assert not validate_parameter(NumberParameter(name="x"), value)

    def test_range_is_inclusive(self):
        param = NumberParameter(name="age", min=18, max=99)
        assert validate_parameter(param, 18)
        assert validate_parameter(param, 99)
        assert not validate_parameter(param, 17)
        assert not validate_parameter(param, 100)

    def test_step_not_enforced(self):
        assert validate_parameter(NumberParameter(name="qty", step=5), 7)

    def test_range_problem_message(self):
        param = NumberParameter(name="age", min=18, max=99)
        assert describe_problem(param, 5) == "age must be a number between 18 and 99"


class TestDateValidation:

    def test_iso_date(self):
        assert validate_parameter(DateParameter(name="date"), "2026-01-08")

    @pytest.mark.parametrize("value", [
        "next week thursday",
        "2026-1-8",
        "08/01/2026",
        "2026-01-08T10:00:00",
        "2026-02-30",
        "2026-13-01",
    ])
    def test_rejects_non_iso_or_impossible_dates(self, value):
        assert not validate_parameter(DateParameter(name="date"), value)

    def test_bounds_are_hints_only(self):
        param = DateParameter(name="date", min="2030-01-01", max="2030-12-31")
        assert validate_parameter(param, "2026-01-08")


class TestSelectValidation:

    def test_value_in_options(self):
        param = SelectParameter(name="theme", options=[SelectOption("Light", "light")])
        assert validate_parameter(param, "light")

    def test_label_is_not_a_value(self):
        param = SelectParameter(name="theme", options=[SelectOption("Light", "light")])
        assert not validate_parameter(param, "Light")

    def test_static_options_win_over_supplier(self):
        param = SelectParameter(
            name="theme",
            options=[SelectOption("Light", "light")],
            get_options=_supplier,
        )
        assert not validate_parameter(param, "a")

    def test_dynamic_only_accepts_any_string(self):
        param = SelectParameter(name="account", get_options=_supplier)
        assert validate_parameter(param, "anything")
        assert not validate_parameter(param, 3)


class TestFileValidation:

    def test_file_delivery_accepts_handles(self, tmp_path):
        param = FileParameter(name="doc")
        assert validate_parameter(param, io.BytesIO(b"abc"))
        assert validate_parameter(param, b"abc")
        assert validate_parameter(param, tmp_path / "doc.csv")

    def test_description_is_not_a_file(self):
        assert not validate_parameter(FileParameter(name="doc"), "csv file")

    def test_base64_delivery_needs_data_url(self):
        param = FileParameter(name="doc", delivery=FileDelivery.BASE64)
        assert validate_parameter(param, "data:text/csv;base64,YWJj")
        assert not validate_parameter(param, b"abc")
        assert describe_problem(param, "abc") == "doc must be a data: URL"

    def test_list_only_when_multiple(self):
        single = FileParameter(name="doc")
        multi = FileParameter(name="doc", multiple=True)
        files = [io.BytesIO(b"a"), io.BytesIO(b"b")]

        assert not validate_parameter(single, files)
        assert validate_parameter(multi, files)
        assert not validate_parameter(multi, [])
        assert not validate_parameter(multi, [io.BytesIO(b"a"), "notes"])


class TestCommandDefinition:

    def test_valid(self):
        command = Command(command="ping", action=lambda p: "pong")
        assert validate_command(command) is None

    def test_blank_trigger(self):
        assert validate_command(Command(command="  ", action=lambda p: None))

    def test_action_must_be_callable(self):
        assert validate_command(Command(command="ping", action="not callable"))

    def test_duplicate_parameter_names(self):
        command = Command(
            command="ping",
            action=lambda p: None,
            parameters=[{"name": "x"}, {"name": "x", "type": "number"}],
        )
        assert "twice" in validate_command(command)

    def test_select_without_options(self):
        command = Command(
            command="pick",
            action=lambda p: None,
            parameters=[{"name": "choice", "type": "select"}],
        )
        assert "no options" in validate_command(command)
