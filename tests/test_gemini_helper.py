import asyncio

import httpx
import pytest
from google.genai import errors as genai_errors

from bandflow import constants
from bandflow.gemini_helper import gemini_generate_edit_plan
from bandflow.schemas import EditPlanResponseSchema, PlanRequest
from bandflow.shared_utils.exceptions import GenerationFailure, MissingCredential


@pytest.fixture
def plan_request():
    return PlanRequest(system_instruction="You are an editor.", user_instruction="Cut this.")


def test_missing_credential_fails_before_calling(plan_request, make_client):
    client = make_client(text="{}")
    with pytest.raises(MissingCredential):
        asyncio.run(gemini_generate_edit_plan(plan_request, client=client))
    assert client.calls == []


def test_credential_resolved_from_environment(monkeypatch, plan_request, make_client):
    monkeypatch.setenv("API_KEY", "from-env")
    client = make_client(text='{"scenes": [], "soundtrackEnhancement": "ok"}')

    text = asyncio.run(gemini_generate_edit_plan(plan_request, client=client))

    assert text == '{"scenes": [], "soundtrackEnhancement": "ok"}'
    assert len(client.calls) == 1


def test_sends_structured_output_request(plan_request, make_client):
    client = make_client(text="{}")
    asyncio.run(gemini_generate_edit_plan(plan_request, api_key="test-key", client=client))

    call = client.calls[0]
    assert call["model"] == constants.GEMINI_MODEL_NAME
    assert call["contents"] == "Cut this."
    assert call["config"].system_instruction == "You are an editor."
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].response_schema is EditPlanResponseSchema


def test_every_call_reaches_the_service(plan_request, make_client):
    client = make_client(text="{}")
    for _ in range(3):
        asyncio.run(gemini_generate_edit_plan(plan_request, api_key="test-key", client=client))
    assert len(client.calls) == 3


@pytest.mark.parametrize("text", [None, ""])
def test_empty_response_is_a_generation_failure(plan_request, make_client, text):
    client = make_client(text=text)
    with pytest.raises(GenerationFailure):
        asyncio.run(gemini_generate_edit_plan(plan_request, api_key="test-key", client=client))


@pytest.mark.parametrize("error", [
    httpx.ConnectError("connection refused"),
    asyncio.TimeoutError(),
    RuntimeError("unexpected"),
])
def test_call_errors_become_generation_failures(plan_request, make_client, error):
    client = make_client(error=error)
    with pytest.raises(GenerationFailure) as exc_info:
        asyncio.run(gemini_generate_edit_plan(plan_request, api_key="test-key", client=client))
    assert exc_info.value.__cause__ is error
    assert len(client.calls) == 1


@pytest.mark.parametrize("error", [
    genai_errors.ClientError(400, {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}),
    genai_errors.ServerError(503, {"error": {"code": 503, "message": "The model is overloaded", "status": "UNAVAILABLE"}}),
])
def test_gemini_api_errors_become_generation_failures(plan_request, make_client, error):
    client = make_client(error=error)
    with pytest.raises(GenerationFailure) as exc_info:
        asyncio.run(gemini_generate_edit_plan(plan_request, api_key="test-key", client=client))
    assert exc_info.value.__cause__ is error
    assert len(client.calls) == 1
