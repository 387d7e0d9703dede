"""
日期计算工具

所有“今天”都以配置的时区为准，调用方可以传入 now 以固定时间。
"""

import logging
import math
from datetime import date, datetime
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from lunar_python import Lunar

from ..config.defaults import WEEK_LIST
from ..config.settings import settings

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# (截止月, 截止日, 中文名, 星座编号)，日期小于等于截止日即属于该星座
CONSTELLATIONS = [
    (1, 19, "摩羯座", "capricorn"),
    (2, 18, "水瓶座", "aquarius"),
    (3, 20, "双鱼座", "pisces"),
    (4, 19, "白羊座", "aries"),
    (5, 20, "金牛座", "taurus"),
    (6, 21, "双子座", "gemini"),
    (7, 22, "巨蟹座", "cancer"),
    (8, 22, "狮子座", "leo"),
    (9, 22, "处女座", "virgo"),
    (10, 23, "天秤座", "libra"),
    (11, 22, "天蝎座", "scorpio"),
    (12, 21, "射手座", "sagittarius"),
    (12, 31, "摩羯座", "capricorn"),
]


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(tz_name or settings.TIMEZONE)


def now(tz_name: Optional[str] = None) -> datetime:
    """当前时间（带时区）"""
    return datetime.now(get_timezone(tz_name))


def parse_date(value, tz=None) -> datetime:
    """
    把 "YYYY-MM-DD" 或 date 转换成当天零点

    Args:
        value: 日期字符串或 date 对象
        tz: 时区，默认取配置

    Returns:
        datetime: 带时区的零点时间

    Raises:
        ValueError: 格式无法识别
    """
    tz = tz or get_timezone()
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)

    text = str(value).strip().replace('/', '-')
    parsed = datetime.strptime(text, "%Y-%m-%d")
    return parsed.replace(tzinfo=tz)


def diff_day(target: datetime, current: datetime) -> int:
    """
    计算当前时间与目标日期相差的天数

    先对 (current - target) 的小数天数向上取整；结果小于等于 0 时
    改用向下取整后的绝对值。返回值总是非负。
    """
    raw = (current - target).total_seconds() / SECONDS_PER_DAY
    days = math.ceil(raw)
    if days <= 0:
        days = abs(math.floor(raw))
    return days


def split_month_day(value) -> Tuple[int, int]:
    """从 "MM-DD" / "YYYY-MM-DD" / date 中取出月和日"""
    if isinstance(value, date):
        return value.month, value.day
    parts = [p for p in str(value).strip().replace('/', '-').split('-') if p]
    if len(parts) < 2:
        raise ValueError(f"日期格式错误: {value}")
    month, day = int(parts[-2]), int(parts[-1])
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ValueError(f"日期格式错误: {value}")
    return month, day


def lunar_to_solar(year: int, month: int, day: int) -> date:
    """
    农历转公历

    农历小月没有三十，遇到这种情况按二十九处理。
    """
    try:
        solar = Lunar.fromYmd(year, month, day).getSolar()
    except Exception:
        if day < 30:
            raise
        logger.debug(f"农历{year}年{month}月没有{day}日，按{day - 1}日计算")
        solar = Lunar.fromYmd(year, month, day - 1).getSolar()
    return date(solar.getYear(), solar.getMonth(), solar.getDay())


def full_years_between(start: date, today: date) -> int:
    """start 到 today 之间的整年数"""
    years = today.year - start.year
    if (today.month, today.day) < (start.month, start.day):
        years -= 1
    return years


def safe_date(year: int, month: int, day: int) -> date:
    """闰年 2 月 29 日在平年按 2 月 28 日处理"""
    try:
        return date(year, month, day)
    except ValueError:
        if month == 2 and day == 29:
            return date(year, 2, 28)
        raise


def get_constellation(value) -> Dict[str, str]:
    """根据生日获取星座"""
    month, day = split_month_day(value)
    for end_month, end_day, cn, en in CONSTELLATIONS:
        if (month, day) <= (end_month, end_day):
            return {"cn": cn, "en": en}
    return {"cn": "摩羯座", "en": "capricorn"}


def format_today(current: datetime) -> str:
    """例如 2024-01-01 星期一"""
    return f"{current.strftime('%Y-%m-%d')} {WEEK_LIST[current.weekday()]}"
