"""Localize tool status messages for Chinese-speaking chats.

Tool activity arrives as lines like ``🛠️ exec: ls -la`` or ``read: /tmp/a``.
Only the first line (the header) is rewritten, e.g. ``🛠️ 正在执行: ls -la``;
the rest of the message is left alone.
"""

import re
from types import MappingProxyType

import regex

IN_PROGRESS_MARKER = "正在"

TOOL_LABEL_TRANSLATIONS: MappingProxyType[str, str] = MappingProxyType({
    "exec": "正在执行",
    "process": "正在处理进程",
    "apply_patch": "正在应用补丁",
    "read": "正在读取",
    "edit": "正在编辑",
    "write": "正在写入",
    "image": "正在识别",
    "search": "正在搜索",
    "fetch": "正在获取",
    "web": "正在浏览",
    "browser": "正在浏览",
    "canvas": "正在绘制",
    "nodes": "正在查询节点",
    "cron": "正在处理定时任务",
    "message": "正在发送消息",
    "tts": "正在合成语音",
    "gateway": "正在调用网关",
    "agents_list": "正在列出代理",
    "agents list": "正在列出代理",
    "sessions_list": "正在列出会话",
    "sessions list": "正在列出会话",
    "sessions_history": "正在读取会话历史",
    "sessions history": "正在读取会话历史",
    "sessions_send": "正在发送会话消息",
    "sessions send": "正在发送会话消息",
    "sessions_spawn": "正在创建会话",
    "sessions spawn": "正在创建会话",
    "session_status": "正在获取会话状态",
    "session status": "正在获取会话状态",
    "web_search": "正在搜索网页",
    "web search": "正在搜索网页",
    "web_fetch": "正在抓取网页",
    "web fetch": "正在抓取网页",
    "memory_search": "正在检索记忆",
    "memory search": "正在检索记忆",
    "memory_get": "正在读取记忆",
    "memory get": "正在读取记忆",
    "whatsapp_login": "正在登录 WhatsApp",
    "whatsapp login": "正在登录 WhatsApp",
    "whatsapp": "正在操作 WhatsApp",
    "discord": "正在操作 Discord",
    "slack": "正在操作 Slack",
    "telegram": "正在操作 Telegram",
    "download": "正在下载",
    "upload": "正在上传",
    "feishu doc": "正在操作飞书文档",
    "feishu_doc": "正在操作飞书文档",
    "feishu drive": "正在操作飞书云盘",
    "feishu_drive": "正在操作飞书云盘",
    "feishu wiki": "正在操作飞书知识库",
    "feishu_wiki": "正在操作飞书知识库",
    "feishu perm": "正在处理权限",
    "feishu_perm": "正在处理权限",
    "feishu scopes": "正在检查权限范围",
    "feishu_scopes": "正在检查权限范围",
    "feishu app scopes": "正在检查权限范围",
    "feishu_app_scopes": "正在检查权限范围",
})

_EMOJI_RE = regex.compile(r"\p{Extended_Pictographic}")

# Non-greedy label: the first colon separates label from the rest.
_EMOJI_HEADER_RE = re.compile(r"^(\S+)\s+([^:]+?)(:.*)?$")
_PLAIN_HEADER_RE = re.compile(r"^([^:]+?)(:.*)?$")

_PROCESS_POLL_RE = re.compile(r"process:\s*poll\b", re.IGNORECASE)


def localize_tool_label(label: str) -> str:
    trimmed = label.strip()
    if not trimmed:
        return label
    mapped = TOOL_LABEL_TRANSLATIONS.get(trimmed.lower())
    if mapped:
        return mapped
    if trimmed.startswith(IN_PROGRESS_MARKER):
        return trimmed
    return f"{IN_PROGRESS_MARKER}使用工具 {trimmed}"


def localize_tool_message(text: str) -> str:
    """Rewrite the header line of a tool status message."""
    lines = text.split("\n")
    header = lines[0]
    if not header:
        return text

    emoji_match = _EMOJI_HEADER_RE.match(header)
    if emoji_match and _EMOJI_RE.search(emoji_match.group(1)):
        emoji, label, rest = emoji_match.groups()
        lines[0] = f"{emoji} {localize_tool_label(label)}{rest or ''}"
        return "\n".join(lines)

    plain_match = _PLAIN_HEADER_RE.match(header)
    if not plain_match:
        return text
    label, rest = plain_match.groups()
    localized = localize_tool_label(label)
    if localized == label:
        return text
    lines[0] = f"{localized}{rest or ''}"
    return "\n".join(lines)


def is_process_poll_summary(text: str) -> bool:
    """True for ``process: poll`` status lines (inline code markers ignored)."""
    return bool(_PROCESS_POLL_RE.search(text.replace("`", "")))
