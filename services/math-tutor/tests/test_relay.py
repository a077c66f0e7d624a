import pytest

from mathsolver.relay.chat import RelayMessage, chat_with_david, format_messages
from mathsolver.relay.errors import (
    NOT_CONFIGURED_MESSAGE, RATE_LIMIT_MESSAGE, USAGE_LIMIT_MESSAGE, RelayError,
)
from mathsolver.relay.prompts import DAVID_SYSTEM_PROMPT, DEFAULT_IMAGE_QUESTION
from mathsolver.relay.solver import solve_math_problem

from conftest import PNG_DATA_URL, FakeClient, FakeRegistry, gateway_error


def test_solver_sends_image_and_returns_text(fake_client):
    solution = solve_math_problem(PNG_DATA_URL, "capture", fake_client, "test-model")
    assert solution == "Answer: x = 4"
    call = fake_client.completions.calls[0]
    assert call["model"] == "test-model"
    user = call["messages"][1]
    assert {"type": "image_url", "image_url": {"url": PNG_DATA_URL}} in user["content"]


def test_solver_rejects_missing_image(fake_client):
    with pytest.raises(RelayError) as info:
        solve_math_problem("", "upload", fake_client, "m")
    assert info.value.status_code == 400
    assert fake_client.completions.calls == []


def test_solver_without_client_reports_configuration():
    with pytest.raises(RelayError) as info:
        solve_math_problem(PNG_DATA_URL, "capture", None, "m")
    assert info.value.message == NOT_CONFIGURED_MESSAGE


@pytest.mark.parametrize("status, message, code", [
    (429, RATE_LIMIT_MESSAGE, 429),
    (402, USAGE_LIMIT_MESSAGE, 402),
    (503, "AI gateway error: 503", 500),
])
def test_gateway_errors_are_translated(status, message, code):
    client = FakeClient(error=gateway_error(status))
    with pytest.raises(RelayError) as info:
        solve_math_problem(PNG_DATA_URL, "capture", client, "m")
    assert (info.value.message, info.value.status_code) == (message, code)


def test_empty_solution_is_an_error():
    with pytest.raises(RelayError):
        solve_math_problem(PNG_DATA_URL, "capture", FakeClient(content=""), "m")


def test_format_messages_makes_image_messages_multimodal():
    formatted = format_messages([
        RelayMessage(role="assistant", content="Hi"),
        RelayMessage(role="user", content="", image=PNG_DATA_URL),
    ])
    assert formatted[0] == {"role": "assistant", "content": "Hi"}
    assert formatted[1]["content"] == [
        {"type": "image_url", "image_url": {"url": PNG_DATA_URL}},
        {"type": "text", "text": DEFAULT_IMAGE_QUESTION},
    ]


def test_david_prepends_system_prompt(fake_client):
    reply = chat_with_david([RelayMessage(role="user", content="2+2?")], fake_client, "m")
    assert reply == "Answer: x = 4"
    messages = fake_client.completions.calls[0]["messages"]
    assert messages[0] == {"role": "system", "content": DAVID_SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "2+2?"}


def test_analyze_math_endpoint(api):
    res = api.post("/functions/v1/analyze-math", json={"image": PNG_DATA_URL, "type": "upload"})
    assert res.status_code == 200
    assert res.json() == {"solution": "Answer: x = 4"}


def test_analyze_math_endpoint_rate_limited(api, fake_client):
    fake_client.completions.error = gateway_error(429)
    res = api.post("/functions/v1/analyze-math", json={"image": PNG_DATA_URL, "type": "capture"})
    assert res.status_code == 429
    assert res.json() == {"error": RATE_LIMIT_MESSAGE}


def test_analyze_math_endpoint_rejects_unknown_type(api):
    res = api.post("/functions/v1/analyze-math", json={"image": PNG_DATA_URL, "type": "webcam"})
    assert res.status_code == 422


def test_david_chat_endpoint(api):
    res = api.post("/functions/v1/david-chat", json={"messages": [
        {"role": "user", "content": "what is this?", "image": PNG_DATA_URL},
    ]})
    assert res.status_code == 200
    assert res.json() == {"response": "Answer: x = 4"}


def test_david_chat_endpoint_usage_limit(api, fake_client):
    fake_client.completions.error = gateway_error(402)
    res = api.post("/functions/v1/david-chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert res.status_code == 402
    assert res.json() == {"error": USAGE_LIMIT_MESSAGE}


def test_david_chat_endpoint_without_key(api):
    from mathsolver import deps
    from mathsolver.main import app
    app.dependency_overrides[deps.get_clients] = lambda: FakeRegistry(None)
    res = api.post("/functions/v1/david-chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert res.status_code == 500
    assert res.json() == {"error": NOT_CONFIGURED_MESSAGE}
