"""
数据模型定义
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, List, Optional, Union


DateLike = Union[str, date]


@dataclass
class TemplateField:
    """模板消息中的一个字段"""
    name: str
    value: Union[str, int] = ""
    color: str = "#000000"


@dataclass
class Festival:
    """节日/生日"""
    name: str = ""
    type: str = "节日"  # 生日/节日，前缀 * 表示农历
    year: Optional[str] = None
    date: DateLike = ""
    # 以下字段在运行时计算，不持久化
    use_lunar: bool = False
    solar_date: Optional[str] = None
    # 出生当年农历生日对应的公历日期，可能落在公历次年
    solar_birth: "Optional[date]" = None
    solar_date_in_this_year: Optional[str] = None
    diff_day: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Festival":
        year = data.get('year')
        return cls(
            name=str(data.get('name', '')),
            type=str(data.get('type', '节日')),
            year=str(year) if year not in (None, '') else None,
            date=data.get('date', ''),
        )


@dataclass
class DateEntry:
    """自定义纪念日"""
    keyword: str
    date: DateLike
    diff_day: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DateEntry":
        return cls(keyword=str(data.get('keyword', '')), date=data.get('date', ''))


@dataclass
class Slot:
    """自定义插槽"""
    keyword: str
    contents: Any = None
    checkout: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Slot":
        return cls(keyword=str(data.get('keyword', '')), contents=data.get('contents'))


def _pick(data: Dict[str, Any], key: str, alias: str) -> Any:
    """优先取 snake_case 键，没有时取 camelCase 别名"""
    value = data.get(key)
    return data.get(alias) if value is None else value


@dataclass
class User:
    """推送对象"""
    id: str
    name: str = ""
    province: Optional[str] = None
    city: Optional[str] = None
    festivals: Optional[List[Festival]] = None
    customized_date_list: Optional[List[DateEntry]] = None
    horoscope_date: Optional[DateLike] = None
    horoscope_date_type: Optional[str] = None
    use_template_id: Optional[str] = None
    open_url: Optional[str] = None
    wx_template_params: List[TemplateField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        festivals = data.get('festivals')
        date_list = _pick(data, 'customized_date_list', 'customizedDateList')
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name', '')),
            province=data.get('province'),
            city=data.get('city'),
            festivals=[Festival.from_dict(f) for f in festivals] if isinstance(festivals, list) else None,
            customized_date_list=[DateEntry.from_dict(d) for d in date_list] if isinstance(date_list, list) else None,
            horoscope_date=_pick(data, 'horoscope_date', 'horoscopeDate'),
            horoscope_date_type=_pick(data, 'horoscope_date_type', 'horoscopeDateType'),
            use_template_id=_pick(data, 'use_template_id', 'useTemplateId'),
            open_url=_pick(data, 'open_url', 'openUrl'),
        )


@dataclass
class DispatchResult:
    """单个用户的推送结果"""
    name: str
    success: bool


@dataclass
class DispatchSummary:
    """推送统计"""
    need_post_num: int = 0
    success_post_num: int = 0
    fail_post_num: int = 0
    success_post_ids: str = "无"
    fail_post_ids: str = "无"

    def to_dict(self) -> Dict[str, Any]:
        """转成回执消息使用的键名"""
        data = asdict(self)
        return {
            'needPostNum': data['need_post_num'],
            'successPostNum': data['success_post_num'],
            'failPostNum': data['fail_post_num'],
            'successPostIds': data['success_post_ids'],
            'failPostIds': data['fail_post_ids'],
        }
