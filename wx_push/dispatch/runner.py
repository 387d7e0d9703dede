"""
单次推送流程

获取 access_token -> 采集数据并组装每个用户的模板字段 -> 并发推送 -> 发送回执
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from ..config.settings import Settings, settings as default_settings
from ..config.user_config import AppConfig, load_app_config
from ..core.birthday import get_birthday_message, get_date_diff_list
from ..core.collectors import DataCollector
from ..core.date_utils import now
from ..core.errors import ConfigError
from ..core.message_builder import (
    ColorFn,
    build_callback_template_params,
    build_shared_content,
    build_user_template_params,
    get_slot_list,
)
from ..core.models import DispatchSummary, Slot, User
from ..core.wechat_client import WechatClient
from .pusher import Pusher

logger = logging.getLogger(__name__)


async def _build_user_params(user: User, app_config: AppConfig, collector: DataCollector,
                             shared: dict, slots: List[Slot], current: datetime,
                             color_fn: Optional[ColorFn]):
    """计算单个用户的天气、纪念日、节日、星座，写回 user.wx_template_params"""
    province = user.province or app_config.PROVINCE
    city = user.city or app_config.CITY

    weather, constellation_fortune = await asyncio.gather(
        collector.get_weather(province, city),
        collector.get_constellation_fortune(user.horoscope_date, user.horoscope_date_type),
    )

    date_list = user.customized_date_list
    if date_list is None:
        date_list = app_config.CUSTOMIZED_DATE_LIST
    date_diff_list = get_date_diff_list(date_list, current)

    festivals = user.festivals
    if festivals is None:
        festivals = app_config.FESTIVALS
    birthday_message = get_birthday_message(festivals, current, app_config.FESTIVALS_LIMIT)

    user.wx_template_params = build_user_template_params(
        user,
        current,
        province=province,
        city=city,
        weather=weather,
        shared=shared,
        birthday_message=birthday_message,
        constellation_fortune=constellation_fortune,
        date_diff_list=date_diff_list,
        slots=slots,
        color_fn=color_fn,
    )
    logger.info(f"{user.name}: 模板字段组装完成, 共 {len(user.wx_template_params)} 个")


async def get_aggregated_data(app_config: AppConfig, collector: DataCollector,
                              current: Optional[datetime] = None,
                              color_fn: Optional[ColorFn] = None,
                              chooser=None) -> List[User]:
    """
    获取处理好的用户数据

    共用的数据源只请求一次，之后每个用户的数据并发计算。

    Args:
        app_config: 推送配置
        collector: 数据采集器
        current: 当前时间，默认取配置时区的现在
        color_fn: 颜色生成函数
        chooser: 插槽随机选择函数

    Returns:
        list: 已写入 wx_template_params 的用户列表

    Raises:
        ConfigError: 没有 USERS 数组
    """
    if not isinstance(app_config.USERS, list):
        logger.error("配置文件中找不到USERS数组")
        raise ConfigError("配置文件中找不到USERS数组")

    current = current or now()

    ciba, one_talk, earthy_love_words, moment_copyrighting, poison_chicken_soup, poetry = await asyncio.gather(
        collector.get_ciba(),
        collector.get_one_talk(app_config.LITERARY_PREFERENCE),
        collector.get_earthy_love_words(),
        collector.get_moment_copyrighting(),
        collector.get_poison_chicken_soup(),
        collector.get_poetry(),
    )
    shared = build_shared_content(
        ciba, one_talk, earthy_love_words, moment_copyrighting, poison_chicken_soup, poetry
    )
    slots = get_slot_list(app_config.SLOT_LIST, chooser)

    users = app_config.USERS
    await asyncio.gather(*[
        _build_user_params(user, app_config, collector, shared, slots, current, color_fn)
        for user in users
    ])
    return users


async def run_once(settings: Settings = default_settings,
                   app_config: Optional[AppConfig] = None,
                   client: Optional[WechatClient] = None,
                   collector: Optional[DataCollector] = None,
                   current: Optional[datetime] = None) -> Optional[DispatchSummary]:
    """
    执行一次完整推送

    Returns:
        DispatchSummary: 推送统计；拿不到 access_token 时返回 None

    Raises:
        ConfigError: 配置缺失
    """
    if app_config is None:
        app_config = load_app_config(settings.CONFIG_PATH, settings.APP_ID, settings.APP_SECRET)

    client = client or WechatClient(app_config.APP_ID, app_config.APP_SECRET, timeout=settings.REQUEST_TIMEOUT)
    access_token = await asyncio.to_thread(client.get_access_token)
    if not access_token:
        logger.error("获取 accessToken 失败，本次不推送")
        return None

    current = current or now(settings.TIMEZONE)
    collector = collector or DataCollector(timeout=settings.REQUEST_TIMEOUT)
    users = await get_aggregated_data(app_config, collector, current)

    pusher = Pusher(client, settings.DEFAULT_OPEN_URL)
    summary = await pusher.send_message_reply(users, access_token)

    if app_config.CALLBACK_TEMPLATE_ID and app_config.CALLBACK_USERS:
        callback_params = build_callback_template_params(summary, current, settings.TIMEZONE)
        await pusher.send_message_reply(
            app_config.CALLBACK_USERS,
            access_token,
            app_config.CALLBACK_TEMPLATE_ID,
            callback_params,
        )
    else:
        logger.info("未配置回执模板或回执用户，跳过回执")

    return summary
