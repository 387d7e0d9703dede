"""
节日、生日倒数
"""

import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from .date_utils import (
    diff_day,
    full_years_between,
    lunar_to_solar,
    parse_date,
    safe_date,
    split_month_day,
)
from .models import DateEntry, Festival

logger = logging.getLogger(__name__)

LUNAR_MARKER = re.compile(r'^\*')

BIRTHDAY = '生日'
FESTIVAL = '节日'


def normalize_festival(festival: Festival, current: datetime) -> Festival:
    """
    处理农历标记

    type 以 * 开头表示农历日期，会计算出生年份对应的公历日期 solar_date
    和今年对应的公历日期 solar_date_in_this_year。
    """
    festival.use_lunar = bool(LUNAR_MARKER.match(festival.type or ''))
    festival.type = LUNAR_MARKER.sub('', festival.type or '')
    if not festival.use_lunar:
        return festival

    month, day = split_month_day(festival.date)
    in_this_year = lunar_to_solar(current.year, month, day)
    festival.solar_date_in_this_year = f"{in_this_year.month}-{in_this_year.day}"
    if festival.year:
        solar = lunar_to_solar(int(festival.year), month, day)
        festival.solar_birth = solar
        festival.solar_date = f"{solar.month}-{solar.day}"
    return festival


def compute_diff_day(festival: Festival, current: datetime) -> int:
    """距离下一次（含今天）的天数，0 表示就是今天"""
    today = current.date()
    month, day = split_month_day(festival.date)

    if festival.use_lunar:
        # 从去年的农历开始找，避免年末的农历日期落到公历次年时被跳过
        year = today.year - 1
        while True:
            days = (lunar_to_solar(year, month, day) - today).days
            if days >= 0:
                return days
            year += 1

    days = (safe_date(today.year, month, day) - today).days
    if days >= 0:
        return days
    return (safe_date(today.year + 1, month, day) - today).days


def sort_birthday_time(festivals: Iterable[Festival], current: datetime) -> List[Festival]:
    """计算每一项的 diff_day 并按从近到远排序"""
    result = []
    for item in festivals:
        # 全局节日配置会被多个用户共用，先复制一份再计算
        festival = replace(item)
        try:
            normalize_festival(festival, current)
            festival.diff_day = compute_diff_day(festival, current)
        except Exception as e:
            logger.error(f"节日日期格式错误，已跳过: {festival.name} {festival.date}, error={e}")
            continue
        result.append(festival)
    return sorted(result, key=lambda f: f.diff_day)


def get_age(festival: Festival, current: datetime) -> int:
    """
    当前周岁

    农历生日使用出生当年农历对应的公历日期计算。没有出生年份时返回 0。
    """
    if not festival.year:
        return 0
    if festival.use_lunar and festival.solar_birth:
        birth = festival.solar_birth
    else:
        month, day = split_month_day(festival.date)
        birth = safe_date(int(festival.year), month, day)
    return max(full_years_between(birth, current.date()), 0)


def build_festival_message(festival: Festival, current: datetime) -> Optional[str]:
    """单条节日/生日文案，类型不认识时返回 None"""
    if festival.type == BIRTHDAY:
        age = get_age(festival, current)
        if festival.diff_day == 0:
            age_text = f"{age}岁" if age else ""
            return f"今天是 {festival.name} 的{age_text}生日哦，祝{festival.name}生日快乐！"
        age_text = f"{age + 1}岁" if age else ""
        return f"距离 {festival.name} 的{age_text}生日还有{festival.diff_day}天"

    if festival.type == FESTIVAL:
        if festival.diff_day == 0:
            return f"今天是 {festival.name} 哦，要开心！"
        return f"距离 {festival.name} 还有{festival.diff_day}天"

    return None


def get_birthday_message(festivals: Iterable[Festival], current: datetime, limit: Optional[int] = None) -> str:
    """
    生成节日/生日倒数文案

    Args:
        festivals: 节日列表
        current: 当前时间
        limit: 只取最近的几项，None 或 0 表示不限制

    Returns:
        str: 每项一行
    """
    birthday_list = sort_birthday_time(festivals or [], current)
    if limit:
        birthday_list = birthday_list[:limit]

    res_message = ''
    for festival in birthday_list:
        message = build_festival_message(festival, current)
        if message:
            res_message += f"{message} \n"
    return res_message


def get_date_diff_list(date_list: Iterable[DateEntry], current: datetime) -> List[DateEntry]:
    """计算每个纪念日与今天相差的天数"""
    result = []
    for item in date_list or []:
        try:
            target = parse_date(item.date, current.tzinfo)
        except (ValueError, TypeError) as e:
            logger.error(f"纪念日日期格式错误，已跳过: {item.keyword} {item.date}, error={e}")
            continue
        result.append(replace(item, diff_day=diff_day(target, current)))
    return result
