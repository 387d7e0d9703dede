"""
异常定义
"""


class WxPushError(Exception):
    """推送流程异常基类"""


class ConfigError(WxPushError):
    """配置缺失或格式错误，终止本次运行"""


class CollectorError(WxPushError):
    """外部数据源请求失败，由采集器内部兜底"""
