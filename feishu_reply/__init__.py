"""feishu-reply - reply delivery pipeline for Feishu/Lark bots."""

__version__ = "0.1.0"
__logo__ = "🪶"
