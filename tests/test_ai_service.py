"""
测试AI写作建议
"""
import json

import httpx
import pytest

from app.api.ai_suggestions import get_ai_service
from app.core.exceptions import ServiceUnavailable, UpstreamServiceError, ValidationFailed
from app.services.ai_service import AIService
from main import app


def _completion(content) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def _service(handler) -> AIService:
    return AIService(api_key="test-key", api_base="https://llm.example.com/v1", transport=httpx.MockTransport(handler))


async def test_title_suggestion_request_shape():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return _completion("  Rains Bring Relief to Farmers  ")

    result = await _service(handler).suggest("Farmers celebrate rains", "title")
    assert result == {"title": "Rains Bring Relief to Farmers"}

    request = captured[0]
    assert str(request.url) == "https://llm.example.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    payload = json.loads(request.content)
    assert payload["max_tokens"] == 100
    assert payload["temperature"] == 0.7
    assert payload["messages"][0]["role"] == "system"
    assert "title" in payload["messages"][0]["content"]
    assert payload["messages"][1] == {"role": "user", "content": "Farmers celebrate rains"}


async def test_content_suggestion_uses_larger_budget():
    captured = []

    def handler(request):
        captured.append(json.loads(request.content))
        return _completion("Full article")

    await _service(handler).suggest("Write about the new rail link", "content")
    assert captured[0]["max_tokens"] == 2000


async def test_empty_prompt_is_rejected():
    service = _service(lambda request: _completion("unused"))
    with pytest.raises(ValidationFailed):
        await service.suggest("   ", "excerpt")


@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "boom"}),
    _completion(""),
    httpx.Response(200, json={"choices": []}),
])
async def test_failed_or_empty_response(response):
    with pytest.raises(UpstreamServiceError):
        await _service(lambda request: response).suggest("Prompt", "excerpt")


async def test_missing_api_key():
    with pytest.raises(ServiceUnavailable):
        await AIService(api_key="").suggest("Prompt", "title")


async def test_suggestion_route(client, author, viewer):
    _, author_headers = author
    _, viewer_headers = viewer
    app.dependency_overrides[get_ai_service] = lambda: _service(lambda request: _completion("Short excerpt"))

    response = await client.post("/api/ai/suggestions", headers=viewer_headers, json={"prompt": "x", "type": "excerpt"})
    assert response.status_code == 403

    response = await client.post("/api/ai/suggestions", headers=author_headers, json={"prompt": "Story", "type": "excerpt"})
    assert response.status_code == 200
    assert response.json()["data"] == {"excerpt": "Short excerpt"}

    response = await client.post("/api/ai/suggestions", headers=author_headers, json={"prompt": "Story", "type": "poem"})
    assert response.status_code == 422
