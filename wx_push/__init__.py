"""
微信测试号每日推送
"""

__version__ = "1.0.0"
