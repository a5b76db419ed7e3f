import json

import httpx
import pytest

from app.exceptions import (
    EmptyGenerationException,
    EmptyPromptException,
    GenerationInProgressException,
    MissingCredentialException,
    UpstreamErrorException,
)
from app.services.credential_service import CredentialHolder
from app.services.generation_service import (
    SYSTEM_PROMPT,
    CompletionFailure,
    CompletionSuccess,
    GenerationClient,
    parse_completion_response,
)


@pytest.mark.asyncio
async def test_generate_sends_one_chat_completion_request(make_client, fake_endpoint):
    endpoint = fake_endpoint.returning("graph TD\nA-->B")
    client = make_client(endpoint)

    text = await client.generate("  flowchart for login  ")

    assert text == "graph TD\nA-->B"
    assert len(endpoint.requests) == 1
    request = endpoint.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://llm.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test-key"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["temperature"] == 0.2
    assert body["max_tokens"] == 512
    assert body["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "flowchart for login"},
    ]
    assert client.in_progress is False


@pytest.mark.asyncio
@pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
async def test_blank_prompt_never_hits_network(make_client, fake_endpoint, prompt):
    endpoint = fake_endpoint.returning("graph TD")
    client = make_client(endpoint)

    with pytest.raises(EmptyPromptException):
        await client.generate(prompt)
    assert endpoint.requests == []


@pytest.mark.asyncio
async def test_missing_credential_never_hits_network(make_client, fake_endpoint):
    endpoint = fake_endpoint.returning("graph TD")
    client = make_client(endpoint, CredentialHolder(None))

    with pytest.raises(MissingCredentialException):
        await client.generate("a flowchart")
    assert endpoint.requests == []


@pytest.mark.asyncio
async def test_upstream_error_uses_body_message(make_client, fake_endpoint):
    endpoint = fake_endpoint(status_code=401, json_body={"error": {"message": "Incorrect API key provided"}})
    client = make_client(endpoint)

    with pytest.raises(UpstreamErrorException) as exc_info:
        await client.generate("a flowchart")

    assert exc_info.value.message == "Incorrect API key provided"
    assert exc_info.value.upstream_status == 401
    assert client.in_progress is False


@pytest.mark.asyncio
async def test_upstream_error_without_body_gets_generic_message(make_client, fake_endpoint):
    endpoint = fake_endpoint(status_code=503, content=b"<html>bad gateway</html>")
    client = make_client(endpoint)

    with pytest.raises(UpstreamErrorException) as exc_info:
        await client.generate("a flowchart")

    assert exc_info.value.message == "Generation endpoint returned HTTP 503"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"choices": []},
    {"choices": [{"message": {"role": "assistant", "content": None}}]},
    {"choices": [{"message": {"role": "assistant", "content": "   "}}]},
    {"choices": [{}]},
    {"unexpected": True},
])
async def test_success_without_text_is_empty_generation(make_client, fake_endpoint, body):
    client = make_client(fake_endpoint(json_body=body))

    with pytest.raises(EmptyGenerationException):
        await client.generate("a flowchart")


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_error(credentials):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GenerationClient(credentials, base_url="https://llm.test/v1", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamErrorException) as exc_info:
        await client.generate("a flowchart")
    assert "ConnectError" in exc_info.value.message
    assert client.in_progress is False


@pytest.mark.asyncio
async def test_second_submission_while_in_flight_is_refused(make_client, fake_endpoint):
    endpoint = fake_endpoint.returning("graph TD")
    client = make_client(endpoint)
    client.in_progress = True

    with pytest.raises(GenerationInProgressException):
        await client.generate("a flowchart")
    assert endpoint.requests == []


def test_parse_completion_response_tags_results():
    ok = parse_completion_response(200, {"choices": [{"message": {"content": "graph LR"}}]})
    assert isinstance(ok, CompletionSuccess)
    assert ok.text == "graph LR"

    failed = parse_completion_response(429, {"error": "rate limited"})
    assert isinstance(failed, CompletionFailure)
    assert failed.message == "rate limited"
    assert failed.status_code == 429

    failed = parse_completion_response(500, None)
    assert failed.message == "Generation endpoint returned HTTP 500"
