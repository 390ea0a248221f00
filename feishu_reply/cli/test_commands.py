import json

from typer.testing import CliRunner

from feishu_reply.cli.commands import app

runner = CliRunner()


def test_decode_command() -> None:
    content = json.dumps({
        "zh_cn": {"content": [[{"tag": "text", "text": "hi"}, {"tag": "img", "image_key": "k1"}]]}
    })

    result = runner.invoke(app, ["decode", content])

    assert result.exit_code == 0
    assert "hi" in result.output
    assert "k1" in result.output


def test_encode_command_with_mention() -> None:
    result = runner.invoke(app, ["encode", "hello", "--mention", "ou_a:Alice"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["zh_cn"]["content"][0][0] == {
        "tag": "at", "user_id": "ou_a", "user_name": "Alice"
    }


def test_encode_rejects_bad_mention() -> None:
    result = runner.invoke(app, ["encode", "hello", "--mention", "nobody"])

    assert result.exit_code != 0


def test_localize_command() -> None:
    result = runner.invoke(app, ["localize", "web_fetch: https://example.com"])

    assert result.exit_code == 0
    assert "正在抓取网页" in result.output


def test_render_mode_command() -> None:
    result = runner.invoke(app, ["render-mode", "```x```", "--mode", "auto"])

    assert result.exit_code == 0
    assert "interactive" in result.output


def test_send_requires_credentials(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("FEISHU_REPLY_APP_ID", raising=False)
    monkeypatch.delenv("FEISHU_REPLY_APP_SECRET", raising=False)

    result = runner.invoke(
        app, ["send", "oc_chat", "hello", "--config", str(tmp_path / "none.json")]
    )

    assert result.exit_code == 1
    assert "not configured" in result.output
