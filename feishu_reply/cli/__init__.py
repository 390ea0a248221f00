"""Command-line interface for feishu_reply."""
