"""
消息构建器

把各数据源的结果拼成微信模板消息需要的字段列表。
"""

import logging
import random
import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config.defaults import DEFAULT_OUTPUT
from .date_utils import format_today
from .models import DateEntry, DispatchSummary, Slot, TemplateField, User

logger = logging.getLogger(__name__)

ColorFn = Callable[[], str]
Chooser = Callable[[list], Any]

# 模板字段名 -> 天气接口字段名
WEATHER_FIELDS = {
    "weather": "weather",
    "min_temperature": "tempn",
    "max_temperature": "temp",
    "wind_direction": "wd",
    "wind_scale": "ws",
}

# 全体用户共用的字段，顺序即模板中的顺序
SHARED_FIELDS = [
    "note_en",
    "note_ch",
    "one_talk",
    "talk_from",
    "earthy_love_words",
    "moment_copyrighting",
    "poison_chicken_soup",
    "poetry_content",
    "poetry_author",
    "poetry_dynasty",
    "poetry_title",
]


def to_lower_line(name: str) -> str:
    """驼峰转下划线，例如 toName -> to_name"""
    return re.sub(r'([A-Z])', r'_\1', name).lower()


def get_color(rng: Optional[random.Random] = None) -> str:
    """随机颜色"""
    rng = rng or random
    return f"#{rng.randint(0, 0xFFFFFF):06x}"


def with_default(name: str, value: Any) -> Any:
    """取不到值时使用默认值表中的兜底值"""
    if value is None or value == '':
        return DEFAULT_OUTPUT.get(name, '')
    return value


def build_field(name: str, value: Any, color_fn: Optional[ColorFn] = None) -> TemplateField:
    """构建单个模板字段，value 为 None 时置空"""
    color_fn = color_fn or get_color
    return TemplateField(
        name=to_lower_line(name),
        value='' if value is None else value,
        color=color_fn(),
    )


def get_slot_list(slots: Iterable[Slot], chooser: Optional[Chooser] = None) -> List[Slot]:
    """
    解析自定义插槽

    contents 为数组时随机取一条，为字符串时原样使用，否则为空字符串。
    """
    chooser = chooser or random.choice
    result = []
    for slot in slots or []:
        if isinstance(slot.contents, list) and slot.contents:
            slot.checkout = str(chooser(slot.contents))
        elif isinstance(slot.contents, str):
            slot.checkout = slot.contents
        else:
            slot.checkout = ''
        result.append(slot)
    return result


def build_shared_content(
    ciba: Dict,
    one_talk: Dict,
    earthy_love_words: str,
    moment_copyrighting: str,
    poison_chicken_soup: str,
    poetry: Dict,
) -> Dict[str, Any]:
    """把共用数据源的结果整理成 字段名 -> 值，缺失的取默认值"""
    raw = {
        "note_en": (ciba or {}).get('content'),
        "note_ch": (ciba or {}).get('note'),
        "one_talk": (one_talk or {}).get('hitokoto'),
        "talk_from": (one_talk or {}).get('from'),
        "earthy_love_words": earthy_love_words,
        "moment_copyrighting": moment_copyrighting,
        "poison_chicken_soup": poison_chicken_soup,
        "poetry_content": (poetry or {}).get('content'),
        "poetry_author": (poetry or {}).get('author'),
        "poetry_dynasty": (poetry or {}).get('dynasty'),
        "poetry_title": (poetry or {}).get('title'),
    }
    return {name: with_default(name, value) for name, value in raw.items()}


def _unique(params: List[TemplateField]) -> List[TemplateField]:
    """同名字段只保留第一个"""
    seen = set()
    result = []
    for item in params:
        if item.name in seen:
            logger.warning(f"模板字段重名，已忽略: {item.name}")
            continue
        seen.add(item.name)
        result.append(item)
    return result


def build_user_template_params(
    user: User,
    current: datetime,
    province: Optional[str],
    city: Optional[str],
    weather: Dict,
    shared: Dict[str, Any],
    birthday_message: str,
    constellation_fortune: List[TemplateField],
    date_diff_list: List[DateEntry],
    slots: List[Slot],
    color_fn: Optional[ColorFn] = None,
) -> List[TemplateField]:
    """
    组装单个用户的模板字段

    顺序: 基本信息、天气、节日生日、每日一句、一言、土味情话等、古诗、
    星座运势、纪念日、插槽。

    Args:
        user: 推送对象
        current: 当前时间
        province: 省份（用户配置优先）
        city: 城市
        weather: 天气接口 weatherinfo
        shared: build_shared_content 的结果
        birthday_message: 节日生日文案
        constellation_fortune: 星座运势字段
        date_diff_list: 已计算 diff_day 的纪念日
        slots: 已解析的插槽
        color_fn: 颜色生成函数

    Returns:
        list: TemplateField 列表，字段名不重复
    """
    color_fn = color_fn or get_color
    weather = weather or {}

    params = [
        build_field('toName', user.name, color_fn),
        build_field('date', format_today(current), color_fn),
        build_field('province', province or '', color_fn),
        build_field('city', city or '', color_fn),
    ]
    for name, key in WEATHER_FIELDS.items():
        params.append(build_field(name, with_default(name, weather.get(key)), color_fn))

    params.append(build_field('birthdayMessage', with_default('birthday_message', birthday_message), color_fn))

    for name in SHARED_FIELDS:
        params.append(build_field(name, with_default(name, shared.get(name)), color_fn))

    params.extend(constellation_fortune or [])
    params.extend(build_field(item.keyword, item.diff_day, color_fn) for item in date_diff_list or [])
    params.extend(build_field(slot.keyword, slot.checkout, color_fn) for slot in slots or [])

    return _unique(params)


def build_callback_template_params(
    summary: DispatchSummary,
    current: datetime,
    time_zone: str,
    color_fn: Optional[ColorFn] = None,
) -> List[TemplateField]:
    """构建推送回执的模板字段"""
    color_fn = color_fn or get_color
    reply = summary.to_dict()
    params = [
        build_field('postTimeZone', time_zone, color_fn),
        build_field('postTime', current.strftime('%Y-%m-%d %H:%M:%S'), color_fn),
    ]
    params.extend(build_field(key, value, color_fn) for key, value in reply.items())
    return params


def to_wx_template_data(params: Iterable[TemplateField]) -> Dict[str, Dict[str, str]]:
    """转换成模板消息接口的 data 字段"""
    return {
        item.name: {"value": str(item.value), "color": item.color}
        for item in params or []
    }
