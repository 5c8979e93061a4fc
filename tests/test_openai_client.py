"""Tests for the OpenAI meal-plan adapter."""

import asyncio
import json

import pytest

from diet_marketplace.adapters.openai_meal_plan_client import OpenAIMealPlanClient
from diet_marketplace.services.meal_plans import MEAL_PLAN_SCHEMA
from tests.conftest import sample_plan_payload


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _generate(client: OpenAIMealPlanClient, effort: str | None) -> dict[str, object]:
    return asyncio.run(
        client.generate(
            model="gpt-5.2",
            reasoning_effort=effort,
            store=False,
            schema=MEAL_PLAN_SCHEMA,
            prompt="Plan my week",
        )
    )


def test_openai_client_parses_structured_output() -> None:
    fake = _FakeOpenAI(json.dumps(sample_plan_payload()))
    client = OpenAIMealPlanClient(client=fake)

    result = _generate(client, "medium")

    assert result["summary"] == "High protein week"
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["text"]["format"]["strict"] is True
    assert payload["text"]["format"]["name"] == "weekly_meal_plan"
    assert payload["reasoning"] == {"effort": "medium"}


def test_openai_client_omits_empty_reasoning() -> None:
    fake = _FakeOpenAI(json.dumps({"summary": "x"}))

    _generate(OpenAIMealPlanClient(client=fake), None)

    assert "reasoning" not in (fake.responses.last_payload or {})


def test_openai_client_rejects_empty_output() -> None:
    client = OpenAIMealPlanClient(client=_FakeOpenAI(""))

    with pytest.raises(RuntimeError):
        _generate(client, None)


def test_openai_client_close() -> None:
    fake = _FakeOpenAI("{}")

    asyncio.run(OpenAIMealPlanClient(client=fake).close())

    assert fake.closed
