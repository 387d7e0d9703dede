"""
微信公众号 API 客户端
"""

import logging
from typing import Dict, Optional

import requests

from ..config.settings import settings

logger = logging.getLogger(__name__)


def mask(secret: str) -> str:
    """日志里只保留前后几位"""
    if not secret:
        return ''
    if len(secret) <= 8:
        return '*' * len(secret)
    return f"{secret[:4]}****{secret[-4:]}"


class WechatClient:
    """微信公众号 API 客户端"""

    def __init__(self, app_id: str, app_secret: str, http=None,
                 timeout: Optional[float] = None):
        self.app_id = app_id
        self.app_secret = app_secret
        self.base_url = "https://api.weixin.qq.com/cgi-bin"
        self.http = http or requests
        self.timeout = timeout or settings.REQUEST_TIMEOUT

    def get_access_token(self) -> Optional[str]:
        """
        获取 access_token

        Returns:
            str: access_token，获取失败时返回 None
        """
        if not self.app_id:
            logger.error("未填写appId!! 请检查配置文件或环境变量APP_ID")
            return None
        if not self.app_secret:
            logger.error("未填写appSecret!! 请检查配置文件或环境变量APP_SECRET")
            return None

        logger.info(f"已获取appId: {mask(self.app_id)}")
        logger.info(f"已获取appSecret: {mask(self.app_secret)}")

        url = f"{self.base_url}/token"
        params = {
            "grant_type": "client_credential",
            "appid": self.app_id,
            "secret": self.app_secret
        }

        try:
            response = self.http.get(url, params=params, timeout=self.timeout)
            data = response.json()

            if response.status_code == 200 and data.get("access_token"):
                logger.info("获取 accessToken: 成功")
                return data["access_token"]

            logger.error(f"获取 accessToken: 请求失败 {data.get('errcode')} {data.get('errmsg')}")
            logger.error("40001: 请检查appId，appSecret 填写是否正确；"
                         "如果第一次使用微信测试号请关闭测试号平台后重新扫码登陆获取最新的appId，appSecret")
            return None

        except Exception as e:
            logger.error(f"获取 accessToken 异常: {e}")
            return None

    def send_template_message(self, access_token: str, touser: str, template_id: str,
                              data: Dict, url: str = "") -> Dict:
        """
        发送模板消息

        Args:
            access_token: 接口凭证
            touser: 接收者 openid
            template_id: 模板 id
            data: 模板数据 {字段名: {"value": ..., "color": ...}}
            url: 点击消息跳转地址

        Returns:
            dict: 接口返回，包含 errcode / errmsg

        Raises:
            requests.RequestException: 网络异常
        """
        payload = {
            "touser": touser,
            "template_id": template_id,
            "url": url,
            "topcolor": "#FF0000",
            "data": data
        }

        response = self.http.post(
            f"{self.base_url}/message/template/send",
            params={"access_token": access_token},
            json=payload,
            timeout=self.timeout
        )
        return response.json()
