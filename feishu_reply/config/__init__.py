"""Configuration module for feishu_reply."""

from feishu_reply.config.loader import load_config, get_config_path
from feishu_reply.config.schema import Config, FeishuConfig

__all__ = ["Config", "FeishuConfig", "load_config", "get_config_path"]
