import asyncio

import pytest

from mealmigo_site.services.chat import (
    FALLBACK_REPLY,
    ChatNotConfiguredError,
    ChatService,
    ChatUpstreamError,
)
from tests.conftest import FakeChatClient


def test_reply_forwards_message() -> None:
    client = FakeChatClient()
    service = ChatService(client=client, model="gpt-3.5-turbo", max_tokens=200)

    reply = asyncio.run(service.reply("What should I eat?"))

    assert reply == "Try adding more leafy greens."
    assert client.calls == [
        {"model": "gpt-3.5-turbo", "message": "What should I eat?", "max_tokens": 200}
    ]


def test_reply_falls_back_when_empty() -> None:
    service = ChatService(client=FakeChatClient(reply=None), model="m", max_tokens=10)

    assert asyncio.run(service.reply("hi")) == FALLBACK_REPLY


def test_reply_without_client() -> None:
    service = ChatService(client=None, model="m", max_tokens=10)

    with pytest.raises(ChatNotConfiguredError, match="Missing OpenAI API key."):
        asyncio.run(service.reply("hi"))


def test_reply_wraps_upstream_failures() -> None:
    client = FakeChatClient(error=RuntimeError("rate limited"))
    service = ChatService(client=client, model="m", max_tokens=10)

    with pytest.raises(ChatUpstreamError):
        asyncio.run(service.reply("hi"))
