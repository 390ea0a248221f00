import json
from unittest.mock import MagicMock

import pytest

from feishu_reply.bus.events import MentionTarget
from feishu_reply.channels.feishu.send import (
    FeishuApiError,
    LarkTransport,
    build_markdown_card,
    format_card_mentions,
    format_text_mentions,
    receive_id_type,
)
from feishu_reply.channels.feishu.typing_indicator import TypingIndicatorState

ALICE = MentionTarget("ou_alice", "Alice")


def _response(success: bool = True, **data: str) -> MagicMock:
    resp = MagicMock()
    resp.success.return_value = success
    resp.code = 0 if success else 230002
    resp.msg = "ok" if success else "bot not in chat"
    resp.get_log_id.return_value = "log_1"
    resp.data = MagicMock(**data)
    return resp


def _client(resp: MagicMock | None = None) -> MagicMock:
    client = MagicMock()
    resp = resp or _response(message_id="om_sent")
    client.im.v1.message.create.return_value = resp
    client.im.v1.message.reply.return_value = resp
    return client


def _sent_request(call: MagicMock):
    return call.call_args.args[0]


def test_receive_id_type_by_prefix() -> None:
    assert receive_id_type("oc_group") == "chat_id"
    assert receive_id_type("ou_user") == "open_id"


def test_mention_formatting() -> None:
    assert format_text_mentions("hi", [ALICE]) == '<at user_id="ou_alice">Alice</at> hi'
    assert format_card_mentions("hi", [ALICE]) == "<at id=ou_alice></at> hi"
    assert format_text_mentions("hi", None) == "hi"
    assert format_card_mentions("hi", []) == "hi"


def test_build_markdown_card() -> None:
    card = build_markdown_card("**x**")

    assert card["elements"] == [{"tag": "markdown", "content": "**x**"}]
    assert card["config"] == {"wide_screen_mode": True}


@pytest.mark.asyncio
async def test_send_text_message_creates_in_chat() -> None:
    client = _client()
    transport = LarkTransport(client)

    message_id = await transport.send_message("oc_chat", "你好", mentions=[ALICE])

    assert message_id == "om_sent"
    req = _sent_request(client.im.v1.message.create)
    assert req.receive_id_type == "chat_id"
    assert req.request_body.receive_id == "oc_chat"
    assert req.request_body.msg_type == "text"
    assert json.loads(req.request_body.content) == {
        "text": '<at user_id="ou_alice">Alice</at> 你好'
    }
    client.im.v1.message.reply.assert_not_called()


@pytest.mark.asyncio
async def test_send_post_message_replies_to_message() -> None:
    client = _client()
    transport = LarkTransport(client)

    await transport.send_message(
        "oc_chat", "**bold**", reply_to_message_id="om_src", message_type="post"
    )

    req = _sent_request(client.im.v1.message.reply)
    assert req.message_id == "om_src"
    assert req.request_body.msg_type == "post"
    body = json.loads(req.request_body.content)
    assert body["zh_cn"]["content"] == [[{"tag": "md", "text": "**bold**"}]]
    client.im.v1.message.create.assert_not_called()


@pytest.mark.asyncio
async def test_send_markdown_card() -> None:
    client = _client()
    transport = LarkTransport(client)

    await transport.send_markdown_card("ou_user", "```py\nx\n```", mentions=[ALICE])

    req = _sent_request(client.im.v1.message.create)
    assert req.receive_id_type == "open_id"
    assert req.request_body.msg_type == "interactive"
    card = json.loads(req.request_body.content)
    assert card["elements"][0]["content"] == "<at id=ou_alice></at> ```py\nx\n```"


@pytest.mark.asyncio
async def test_send_failure_raises_api_error() -> None:
    client = _client(_response(success=False))
    transport = LarkTransport(client)

    with pytest.raises(FeishuApiError) as exc_info:
        await transport.send_message("oc_chat", "hi")

    assert exc_info.value.code == 230002
    assert "log_id=log_1" in str(exc_info.value)


@pytest.mark.asyncio
async def test_add_and_remove_typing_reaction() -> None:
    client = MagicMock()
    client.im.v1.message_reaction.create.return_value = _response(reaction_id="r_9")
    client.im.v1.message_reaction.delete.return_value = _response()
    transport = LarkTransport(client, typing_emoji="Typing")

    state = await transport.add_reaction("om_src")
    await transport.remove_reaction(state)

    assert state == TypingIndicatorState(message_id="om_src", reaction_id="r_9")
    create_req = _sent_request(client.im.v1.message_reaction.create)
    assert create_req.message_id == "om_src"
    assert create_req.request_body.reaction_type.emoji_type == "Typing"
    delete_req = _sent_request(client.im.v1.message_reaction.delete)
    assert delete_req.message_id == "om_src"
    assert delete_req.reaction_id == "r_9"


@pytest.mark.asyncio
async def test_add_reaction_failure_raises() -> None:
    client = MagicMock()
    client.im.v1.message_reaction.create.return_value = _response(success=False)
    transport = LarkTransport(client)

    with pytest.raises(FeishuApiError):
        await transport.add_reaction("om_src")


@pytest.mark.asyncio
async def test_remove_reaction_without_id_skips_api_call() -> None:
    client = MagicMock()
    transport = LarkTransport(client)

    await transport.remove_reaction(TypingIndicatorState(message_id="om_src"))

    client.im.v1.message_reaction.delete.assert_not_called()
