"""Configuration schema (pydantic)."""

from pydantic import BaseModel, Field


class ToolMessagesConfig(BaseModel):
    """How tool status messages are shown in the chat."""

    suppress_process_poll: bool = True  # drop "process: poll" summaries


class FeishuToolsConfig(BaseModel):
    """Feishu document tools; all enabled by default."""

    doc: bool = True
    wiki: bool = True
    drive: bool = True
    perm: bool = True  # permission management
    scopes: bool = True


class FeishuConfig(BaseModel):
    """Feishu/Lark channel configuration."""

    enabled: bool = False
    app_id: str = ""
    app_secret: str = ""
    domain: str = "feishu"  # "feishu" | "lark"
    # "post" | "auto" | "raw" | "card"; other values are sent as plain text
    render_mode: str = "post"
    text_chunk_limit: int = 4000
    chunk_mode: str = "length"  # "length" | "newline"
    markdown_table_mode: str = "bullets"  # "off" | "bullets" | "code"
    typing_emoji: str = "Typing"
    tool_messages: ToolMessagesConfig = Field(default_factory=ToolMessagesConfig)
    tools: FeishuToolsConfig = Field(default_factory=FeishuToolsConfig)


class ChannelsConfig(BaseModel):
    feishu: FeishuConfig = Field(default_factory=FeishuConfig)


class Config(BaseModel):
    """Root configuration."""

    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)
