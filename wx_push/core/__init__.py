"""
核心模块
"""

from .collectors import DataCollector, fetch_or_default
from .wechat_client import WechatClient
from .message_builder import build_user_template_params, build_callback_template_params

__all__ = [
    'DataCollector',
    'fetch_or_default',
    'WechatClient',
    'build_user_template_params',
    'build_callback_template_params',
]
