"""Utility functions for feishu_reply."""

from feishu_reply.utils.text import chunk_text, chunk_text_with_mode, convert_markdown_tables

__all__ = ["chunk_text", "chunk_text_with_mode", "convert_markdown_tables"]
