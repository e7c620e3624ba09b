import pytest
from pydantic import ValidationError

from models import (
    ArgumentTypeError,
    Content,
    FunctionCall,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentResponse,
    MissingRequiredFieldError,
    Part,
    Schema,
    Type,
    UnknownFunctionError,
    text,
    to_part,
)


WIRE_RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {"text": "Checking. "},
                    {"functionCall": {"name": "CurrentWeather", "args": {"location": "New York"}}},
                    {"functionCall": {"name": "RandomNumber", "args": {"limit": "10"}}},
                    {"inlineData": {"mimeType": "image/png", "data": ""}},
                ],
            },
            "finishReason": "STOP",
            "index": 0,
        }
    ],
    "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 4, "totalTokenCount": 16},
    "modelVersion": "gemini-1.5-flash-002",
}


class TestFunctionCallAccessors:
    @pytest.fixture
    def call(self):
        return FunctionCall(
            name="f",
            args={"s": "x", "n": 2.5, "i": 4.0, "b": False, "o": {"k": 1}, "l": [1, 2], "flag": True},
        )

    def test_typed_accessors(self, call):
        assert call.get_string("s") == "x"
        assert call.get_number("n") == 2.5
        assert call.get_integer("i") == 4
        assert isinstance(call.get_integer("i"), int)
        assert call.get_bool("b") is False
        assert call.get_object("o") == {"k": 1}
        assert call.get_list("l") == [1, 2]

    def test_accessor_type_mismatch(self, call):
        with pytest.raises(ArgumentTypeError):
            call.get_string("n")
        with pytest.raises(ArgumentTypeError):
            call.get_number("flag")
        with pytest.raises(ArgumentTypeError):
            call.get_integer("n")

    def test_accessor_missing(self, call):
        with pytest.raises(MissingRequiredFieldError):
            call.get_string("absent")
        assert call.get("absent", "default") == "default"

    def test_validate_args_against_declaration(self):
        declaration = FunctionDeclaration(
            name="CurrentWeather",
            parameters=Schema(
                type=Type.OBJECT,
                properties={"location": Schema(type=Type.STRING)},
                required=["location"],
            ),
        )
        FunctionCall(name="CurrentWeather", args={"location": "Paris"}).validate_args(declaration)
        with pytest.raises(MissingRequiredFieldError):
            FunctionCall(name="CurrentWeather", args={}).validate_args(declaration)
        with pytest.raises(UnknownFunctionError):
            FunctionCall(name="Other", args={}).validate_args(declaration)


class TestParts:
    def test_part_holds_one_kind(self):
        with pytest.raises(ValidationError):
            Part(text="a", function_call=FunctionCall(name="f"))

    def test_to_part_conversions(self):
        assert to_part("hi") == Part(text="hi")
        assert text("hi") == Part(text="hi")
        response = FunctionResponse(name="f", response={"ok": True})
        assert to_part(response).function_response == response
        with pytest.raises(TypeError):
            to_part(42)

    def test_unmodelled_fields_kept(self):
        part = Part.model_validate(
            {"functionCall": {"name": "f", "args": {}, "callTrace": 1}, "thoughtSignature": "sig"}
        )
        assert part.to_wire() == {
            "functionCall": {"name": "f", "args": {}, "callTrace": 1},
            "thoughtSignature": "sig",
        }
        assert not part.is_empty()
        assert not Part.model_validate({"inlineData": {"mimeType": "image/png", "data": ""}}).is_empty()
        assert Part.model_validate({}).is_empty()

    def test_function_response_wire_form(self):
        part = to_part(FunctionResponse(name="CurrentWeather", response={"weather_there": "cold"}))
        assert part.to_wire() == {
            "functionResponse": {"name": "CurrentWeather", "response": {"weather_there": "cold"}}
        }


class TestResponseProjections:
    def test_parse_wire_response(self):
        response = GenerateContentResponse.model_validate(WIRE_RESPONSE)
        assert response.usage_metadata.total_token_count == 16
        assert response.model_version == "gemini-1.5-flash-002"
        assert response.candidates[0].finish_reason == "STOP"
        assert len(response.parts()) == 4

    def test_function_calls_in_order(self):
        response = GenerateContentResponse.model_validate(WIRE_RESPONSE)
        calls = response.function_calls()
        assert [c.name for c in calls] == ["CurrentWeather", "RandomNumber"]
        assert calls[0].get_string("location") == "New York"
        assert response.candidates[0].function_calls() == calls

    def test_text_skips_non_text_parts(self):
        response = GenerateContentResponse.model_validate(WIRE_RESPONSE)
        assert response.text() == "Checking. "

    def test_empty_response_is_total(self):
        response = GenerateContentResponse()
        assert response.parts() == []
        assert response.function_calls() == []
        assert response.text() == ""

    def test_function_call_only_has_empty_text(self):
        content = Content(role="model", parts=[Part(function_call=FunctionCall(name="f"))])
        assert content.text() == ""
        assert len(content.function_calls()) == 1

    def test_text_only_has_no_calls(self):
        content = Content(role="model", parts=[Part(text="a"), Part(text="b")])
        assert content.function_calls() == []
        assert content.text() == "ab"

    def test_projections_do_not_mutate(self):
        response = GenerateContentResponse.model_validate(WIRE_RESPONSE)
        before = response.model_dump()
        response.function_calls().clear()
        response.parts().clear()
        response.text()
        assert response.model_dump() == before
