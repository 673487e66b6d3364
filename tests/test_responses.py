"""
Response Contract Tests
-----------------------
InteractiveResponse shape and the wrapping of action results.
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from commands.models import InteractiveOption, InteractiveResponse, ResponseType, StringParameter
from core.responses import ResponseBuilder

from conftest import make_book_appointment, make_create_user


class TestResponseShape:

    def test_fields_only_on_form(self):
        success = InteractiveResponse(message="ok", type=ResponseType.SUCCESS, fields=[StringParameter(name="x")])
        form = InteractiveResponse(message="?", type=ResponseType.FORM)

        assert success.fields is None
        assert form.fields == []

    def test_options_only_on_choice_types(self):
        error = InteractiveResponse(message="no", type="error", options=[InteractiveOption(label="a")])
        confirm = InteractiveResponse(message="sure?", type="confirm")

        assert error.options is None
        assert confirm.options == []

    def test_wire_format(self):
        response = InteractiveResponse(
            message="Please provide date.",
            type=ResponseType.FORM,
            fields=[StringParameter(name="service", required=True)],
            command_id="book_appointment",
            params={"service": "toyota"},
        )

        assert response.to_dict() == {
            "message": "Please provide date.",
            "type": "form",
            "fields": [{"name": "service", "type": "string", "description": "", "required": True}],
            "commandId": "book_appointment",
            "params": {"service": "toyota"},
        }

    def test_from_dict_requires_type(self):
        with pytest.raises(ValueError):
            InteractiveResponse.from_dict({"message": "hi"})

    def test_from_dict_rejects_malformed_options(self):
        with pytest.raises(ValueError):
            InteractiveResponse.from_dict({"type": "ambiguous", "message": "m", "options": ["a", "b"]})

        with pytest.raises(ValueError):
            InteractiveResponse.from_dict({"type": "form", "message": "m", "fields": "service"})

    def test_from_dict(self):
        response = InteractiveResponse.from_dict({
            "type": "ambiguous",
            "message": "Which?",
            "options": [{"label": "A", "commandId": "a"}],
        })

        assert response.type == ResponseType.AMBIGUOUS
        assert response.options[0].command_id == "a"


class TestResponseBuilder:

    def setup_method(self):
        self.builder = ResponseBuilder()

    def test_fallback(self):
        response = self.builder.no_match()

        assert response.type == ResponseType.ERROR
        assert response.message == "Sorry, I didn't understand that."

    def test_not_found(self):
        assert self.builder.not_found("nope").message == 'Command not found: "nope"'

    def test_form_message_single_field(self):
        command = make_book_appointment()
        response = self.builder.form(command, [command.get_parameter("date")])

        assert response.message == "Please provide date."
        assert response.field_names == ["date"]

    def test_form_message_several_fields(self):
        command = make_book_appointment()
        response = self.builder.form(command, command.parameters)

        assert response.message == 'Please provide the required details for "book appointment".'

    def test_form_keeps_resolver_prompt(self):
        command = make_book_appointment()
        response = self.builder.form(command, command.parameters, "When should we book it?")

        assert response.message == "When should we book it?"

    def test_ambiguous_options(self):
        response = self.builder.ambiguous([make_book_appointment(), make_create_user()])

        assert [o.command_id for o in response.options] == ["book_appointment", "create_user"]
        assert response.options[0].label == "book appointment"
        assert all(o.value is None for o in response.options)


class TestActionResults:

    def setup_method(self):
        self.builder = ResponseBuilder()
        self.command = make_book_appointment()

    def test_string(self):
        response = self.builder.from_action_result("Booked.", self.command)

        assert response.type == ResponseType.SUCCESS
        assert response.message == "Booked."
        assert response.command_id == "book_appointment"

    def test_none(self):
        response = self.builder.from_action_result(None, self.command)
        assert (response.type, response.message) == (ResponseType.SUCCESS, "")

    def test_response_passes_through(self):
        own = InteractiveResponse(message="Nope", type=ResponseType.ERROR)
        assert self.builder.from_action_result(own, self.command) is own

    def test_wire_dict_coerced(self):
        response = self.builder.from_action_result({"type": "question", "message": "Anything else?"}, self.command)

        assert response.type == ResponseType.QUESTION
        assert response.message == "Anything else?"

    def test_other_values_stringified(self):
        assert self.builder.from_action_result(42, self.command).message == "42"

    def test_bad_dict_stringified(self):
        response = self.builder.from_action_result({"type": "bogus"}, self.command)

        assert response.type == ResponseType.SUCCESS
        assert response.message == "{'type': 'bogus'}"

    def test_dict_with_malformed_options_stringified(self):
        result = {"type": "ambiguous", "message": "m", "options": ["a", "b"]}

        response = self.builder.from_action_result(result, self.command)

        assert response.type == ResponseType.SUCCESS
        assert response.message == str(result)
