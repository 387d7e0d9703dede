"""
推送执行器
"""

import asyncio
import logging
from typing import List, Optional

from ..config.defaults import NONE_PLACEHOLDER
from ..config.settings import settings
from ..core.message_builder import to_wx_template_data
from ..core.models import DispatchResult, DispatchSummary, TemplateField, User
from ..core.wechat_client import WechatClient

logger = logging.getLogger(__name__)

# 已知错误码对应的提示
ERRCODE_MESSAGES = {
    40003: "推送消息失败! id填写不正确！应该填用户扫码后生成的id！请检查配置文件！",
    40036: "推送消息失败! 模板id填写不正确！应该填模板id！请检查配置文件！",
}


class Pusher:
    """推送执行器"""

    def __init__(self, client: WechatClient, default_url: Optional[str] = None):
        self.client = client
        self.default_url = default_url or settings.DEFAULT_OPEN_URL

    async def send_message(self, template_id: Optional[str], user: User, access_token: str,
                           params: Optional[List[TemplateField]]) -> DispatchResult:
        """
        给单个用户发送模板消息

        Args:
            template_id: 模板 id
            user: 推送对象
            access_token: 接口凭证
            params: 模板字段

        Returns:
            DispatchResult: 是否推送成功
        """
        data = to_wx_template_data(params if isinstance(params, list) else [])

        try:
            res = await asyncio.to_thread(
                self.client.send_template_message,
                access_token,
                user.id,
                template_id,
                data,
                user.open_url or self.default_url
            )
        except Exception as e:
            logger.error(f"{user.name}: 推送消息异常, error={e}")
            return DispatchResult(name=user.name, success=False)

        errcode = res.get("errcode") if isinstance(res, dict) else None
        if errcode == 0:
            logger.info(f"{user.name}: 推送消息成功")
            return DispatchResult(name=user.name, success=True)

        if errcode in ERRCODE_MESSAGES:
            logger.error(f"{user.name}: {ERRCODE_MESSAGES[errcode]}")
        else:
            logger.error(f"{user.name}: 推送消息失败, {res}")
        return DispatchResult(name=user.name, success=False)

    async def send_message_reply(self, users: List[User], access_token: str,
                                 template_id: Optional[str] = None,
                                 params: Optional[List[TemplateField]] = None) -> DispatchSummary:
        """
        并发推送给所有用户，并统计成功失败

        Args:
            users: 推送对象列表
            access_token: 接口凭证
            template_id: 统一的模板 id，不传则使用用户自己的 use_template_id
            params: 统一的模板字段，不传则使用用户自己的 wx_template_params

        Returns:
            DispatchSummary: 推送统计
        """
        results = await asyncio.gather(*[
            self.send_message(
                template_id or user.use_template_id,
                user,
                access_token,
                params if params is not None else user.wx_template_params
            )
            for user in users
        ])

        success_ids = [item.name for item in results if item.success]
        fail_ids = [item.name for item in results if not item.success]

        summary = DispatchSummary(
            need_post_num=len(users),
            success_post_num=len(success_ids),
            fail_post_num=len(fail_ids),
            success_post_ids=','.join(success_ids) if success_ids else NONE_PLACEHOLDER,
            fail_post_ids=','.join(fail_ids) if fail_ids else NONE_PLACEHOLDER
        )
        logger.info(f"推送完成: 需要={summary.need_post_num}, 成功={summary.success_post_num}, "
                    f"失败={summary.fail_post_num}")
        return summary
