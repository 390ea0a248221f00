"""CLI commands for feishu-reply."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from feishu_reply import __logo__, __version__
from feishu_reply.bus.events import MentionTarget, ReplyKind, ReplyPayload
from feishu_reply.channels.feishu.dispatcher import create_feishu_reply_dispatcher
from feishu_reply.channels.feishu.post import encode_post, parse_post_content
from feishu_reply.channels.feishu.render import select_render_mode
from feishu_reply.channels.feishu.tool_messages import localize_tool_message
from feishu_reply.config.loader import load_config
from feishu_reply.settings import get_settings

app = typer.Typer(
    name="feishu-reply",
    help=f"{__logo__} feishu-reply - Feishu/Lark reply delivery",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else get_settings().log_level
    logger.remove()
    logger.add(sys.stderr, level=level)


def _parse_mention(value: str) -> MentionTarget:
    open_id, sep, name = value.partition(":")
    if not sep or not open_id:
        raise typer.BadParameter(f"expected OPEN_ID:NAME, got {value!r}")
    return MentionTarget(open_id=open_id, name=name or open_id)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} feishu-reply v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """feishu-reply - Feishu/Lark reply delivery."""
    _configure_logging(verbose)


# ============================================================================
# Post codec / localization helpers
# ============================================================================


@app.command()
def decode(content: str = typer.Argument(..., help="Post content JSON")):
    """Decode a post message into plain text and image keys."""
    parsed = parse_post_content(content)
    console.print(parsed.text_content, markup=False)
    if parsed.image_keys:
        console.print(f"[dim]images: {', '.join(parsed.image_keys)}[/dim]")


@app.command()
def encode(
    text: str = typer.Argument(..., help="Markdown text"),
    mention: list[str] = typer.Option(
        [], "--mention", "-m", help="Mention as OPEN_ID:NAME (repeatable)"
    ),
):
    """Encode text (and mentions) as post message content."""
    mentions = [_parse_mention(m) for m in mention]
    console.print_json(encode_post(text, mentions))


@app.command()
def localize(text: str = typer.Argument(..., help="Tool status message")):
    """Localize a tool status message."""
    console.print(localize_tool_message(text), markup=False)


@app.command("render-mode")
def render_mode(
    text: str = typer.Argument(..., help="Reply text"),
    mode: str = typer.Option("post", "--mode", help="post | auto | raw | card"),
):
    """Show how a reply would be rendered."""
    decision = select_render_mode(text, mode)
    table = Table(title="Render decision")
    table.add_column("mode")
    table.add_column("use_card")
    table.add_column("use_post")
    table.add_column("message type")
    table.add_row(mode, str(decision.use_card), str(decision.use_post), decision.message_type)
    console.print(table)


# ============================================================================
# Send
# ============================================================================


@app.command()
def send(
    chat_id: str = typer.Argument(..., help="Target chat_id (oc_) or open_id (ou_)"),
    text: str = typer.Argument(..., help="Reply text"),
    reply_to: str = typer.Option(None, "--reply-to", "-r", help="Message id to reply to"),
    kind: ReplyKind = typer.Option(ReplyKind.FINAL, "--kind", "-k", help="Payload kind"),
    mention: list[str] = typer.Option(
        [], "--mention", "-m", help="Mention as OPEN_ID:NAME (repeatable)"
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Deliver one reply through the Feishu Open API."""
    config = load_config(config_path)
    feishu = config.channels.feishu
    if not feishu.app_id or not feishu.app_secret:
        console.print("[red]Error: Feishu app_id / app_secret not configured.[/red]")
        console.print(json.dumps({"channels": {"feishu": {"appId": "...", "appSecret": "..."}}}))
        raise typer.Exit(1)

    dispatcher = create_feishu_reply_dispatcher(
        feishu,
        chat_id,
        reply_to_message_id=reply_to,
        mention_targets=[_parse_mention(m) for m in mention],
    )
    ok = asyncio.run(dispatcher.run([ReplyPayload(text=text, kind=kind)]))
    if not ok:
        console.print("[red]✗[/red] Delivery failed")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Sent to {chat_id}")


if __name__ == "__main__":
    app()
