"""Inbound chat payload validation and message value objects."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from vault_chat.base.dto import ChatStartDTO
from vault_chat.base.models import ChatMessage, ChatRequest


def test_valid_payload_normalizes_optional_fields():
    dto = ChatStartDTO.model_validate(
        {"messages": [{"role": "user", "content": "Hi"}], "model": "  ", "session_id": " s1 "}
    )
    assert dto.model is None  # nosec B101
    assert dto.session_id == "s1"  # nosec B101
    assert dto.provider is None  # nosec B101
    assert dto.to_messages() == [ChatMessage(role="user", content="Hi")]  # nosec B101


def test_missing_content_defaults_to_empty():
    dto = ChatStartDTO.model_validate({"messages": [{"role": "assistant"}]})
    assert dto.to_messages()[0].content == ""  # nosec B101


@pytest.mark.parametrize(
    "payload",
    [
        {"messages": []},
        {},
        {"messages": [{"role": "tool", "content": "x"}]},
        {"messages": [{"role": "user", "content": "x"}], "provider": "gemini"},
    ],
)
def test_invalid_payloads(payload):
    with pytest.raises(ValidationError):
        ChatStartDTO.model_validate(payload)


def test_chat_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        ChatMessage(role="tool", content="x")  # type: ignore[arg-type]


def test_chat_request_preserves_order_and_validates_budget():
    msgs = [ChatMessage(role="system", content="s"), ChatMessage(role="user", content="u")]
    request = ChatRequest.build("m", iter(msgs))
    assert request.wire_messages() == [  # nosec B101
        {"role": "system", "content": "s"},
        {"role": "user", "content": "u"},
    ]
    with pytest.raises(ValueError):
        ChatRequest.build("m", msgs, max_output_tokens=0)
