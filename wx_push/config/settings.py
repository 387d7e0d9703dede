"""
配置管理
"""

import os


class Settings:
    """从环境变量加载配置"""

    # 微信测试号凭证（配置文件未填写时从环境变量获取）
    APP_ID: str = os.getenv('APP_ID', '')
    APP_SECRET: str = os.getenv('APP_SECRET', '')

    # 推送配置文件路径
    CONFIG_PATH: str = os.getenv('CONFIG_PATH', 'config/config.yaml')

    # 时区，日期计算都以该时区的“今天”为准
    TIMEZONE: str = os.getenv('TIMEZONE', 'Asia/Shanghai')

    # 单次请求超时（秒）
    REQUEST_TIMEOUT: float = float(os.getenv('REQUEST_TIMEOUT', '10'))

    # 今日诗词 token
    JINRISHICI_TOKEN: str = os.getenv('JINRISHICI_TOKEN', '')

    # 模板消息点击跳转地址
    DEFAULT_OPEN_URL: str = os.getenv('DEFAULT_OPEN_URL', 'https://mp.weixin.qq.com')

    # 日志级别
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    def validate(self):
        """验证必需配置"""
        if self.REQUEST_TIMEOUT <= 0:
            raise ValueError("REQUEST_TIMEOUT 必须大于 0")
        if not self.CONFIG_PATH:
            raise ValueError("CONFIG_PATH 环境变量未设置")


settings = Settings()
