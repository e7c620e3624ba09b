import asyncio
import re
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from genai import Client
from models import (
    Candidate,
    Content,
    FunctionCall,
    FunctionCallingMode,
    FunctionDeclaration,
    GenerateContentRequest,
    GenerateContentResponse,
    Part,
    Schema,
    Tool,
    Type,
    UsageMetadata,
)

LOCATION_PATTERN = re.compile(r"\bin ([A-Z][A-Za-z]*(?: [A-Z][A-Za-z]*)*)")


def text_response(value: str, role: Optional[str] = "model") -> GenerateContentResponse:
    return GenerateContentResponse(
        candidates=[Candidate(index=0, content=Content(role=role, parts=[Part(text=value)]))],
        usage_metadata=UsageMetadata(prompt_token_count=5, candidates_token_count=3, total_token_count=8),
    )


def call_response(*calls: FunctionCall) -> GenerateContentResponse:
    return GenerateContentResponse(
        candidates=[
            Candidate(index=0, content=Content(role="model", parts=[Part(function_call=c) for c in calls]))
        ],
        usage_metadata=UsageMetadata(prompt_token_count=7, candidates_token_count=2, total_token_count=9),
    )


class FakeGeminiTransport:
    """Deterministic stand-in for the remote model.

    Text prompts mentioning a declared function's topic produce a call to it
    (unless the mode is NONE), FunctionResponses produce a text answer
    built from the response values. ``ignore_mode`` makes it call functions
    even under NONE.
    """

    def __init__(self, ignore_mode: bool = False) -> None:
        self.ignore_mode = ignore_mode
        self.requests: List[Tuple[str, GenerateContentRequest]] = []
        self.closed = False

    async def generate_content(self, model_name: str, request: GenerateContentRequest) -> GenerateContentResponse:
        self.requests.append((model_name, request))
        last_turn = request.contents[-1]

        responses = last_turn.function_responses()
        if responses:
            location = self._last_call_location(request.contents)
            values = " and ".join(str(v) for r in responses for v in r.response.values())
            return text_response(f"The weather in {location} is {values}.")

        prompt = last_turn.text()
        mode = request.tool_config.mode if request.tool_config else FunctionCallingMode.AUTO
        if mode is FunctionCallingMode.NONE and not self.ignore_mode:
            return text_response("I cannot look that up right now.")

        declaration = self._select(request.tools or [], prompt)
        if declaration is None and mode is FunctionCallingMode.ANY and request.tools:
            declaration = request.tools[0].function_declarations[0]
        if declaration is None:
            return text_response(f"You said: {prompt}")

        args: Dict[str, Any] = {}
        match = LOCATION_PATTERN.search(prompt)
        if declaration.parameters and "location" in (declaration.parameters.properties or {}) and match:
            args["location"] = match.group(1)
        return call_response(FunctionCall(name=declaration.name, args=args))

    @staticmethod
    def _select(tools: List[Tool], prompt: str) -> Optional[FunctionDeclaration]:
        words = set(re.findall(r"[a-z]+", prompt.lower()))
        for tool in tools:
            for declaration in tool.function_declarations:
                topic = f"{declaration.name} {declaration.description or ''}".lower()
                if words & set(re.findall(r"[a-z]{5,}", topic)):
                    return declaration
        return None

    @staticmethod
    def _last_call_location(contents: List[Content]) -> str:
        for turn in reversed(contents):
            for call in turn.function_calls():
                if "location" in call.args:
                    return str(call.args["location"])
        return "that place"

    async def aclose(self) -> None:
        self.closed = True


class ScriptedTransport:
    """Returns queued responses in order; queued exceptions are raised.

    When ``gate`` is set every call waits on it first, which lets tests hold
    a request in flight.
    """

    def __init__(self, *script: Union[GenerateContentResponse, Dict[str, Any], BaseException]) -> None:
        self.script = list(script)
        self.requests: List[Tuple[str, GenerateContentRequest]] = []
        self.gate: Optional[asyncio.Event] = None
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def push(self, *items: Union[GenerateContentResponse, Dict[str, Any], BaseException]) -> None:
        self.script.extend(items)

    async def generate_content(self, model_name: str, request: GenerateContentRequest) -> GenerateContentResponse:
        self.requests.append((model_name, request))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            item = self.script.pop(0)
        finally:
            self.in_flight -= 1
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, dict):
            return GenerateContentResponse.model_validate(item)
        return item

    async def aclose(self) -> None:
        self.closed = True


def current_weather_declaration() -> FunctionDeclaration:
    return FunctionDeclaration(
        name="CurrentWeather",
        description="Get the current weather in a given location",
        parameters=Schema(
            type=Type.OBJECT,
            properties={
                "location": Schema(type=Type.STRING, description="The city and state, e.g. San Francisco, CA"),
                "unit": Schema(type=Type.STRING, enum=["celsius", "fahrenheit"]),
            },
            required=["location"],
        ),
    )


def random_number_declaration() -> FunctionDeclaration:
    return FunctionDeclaration(
        name="RandomNumber",
        description="Generate a random number up to the given limit",
        parameters=Schema(
            type=Type.OBJECT,
            properties={"limit": Schema(type=Type.STRING, description="Upper bound")},
            required=["limit"],
        ),
    )


@pytest.fixture
def weather_tool():
    return Tool(function_declarations=[current_weather_declaration()])


@pytest.fixture
def random_tool():
    return Tool(function_declarations=[random_number_declaration()])


@pytest.fixture
def fake_transport():
    return FakeGeminiTransport()


@pytest.fixture
def client(fake_transport):
    return Client(transport=fake_transport)


@pytest.fixture
def scripted_transport():
    return ScriptedTransport()


@pytest.fixture
def scripted_client(scripted_transport):
    return Client(transport=scripted_transport)
