"""
外部数据采集

每个数据源一个方法，任何失败（网络异常、状态码不对、返回格式不对）
都只记录日志并返回默认值，不会抛出异常。
"""

import asyncio
import copy
import json
import logging
import random
import re
import time
from typing import Any, Callable, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from ..config.city_info import get_area_id
from ..config.defaults import (
    DEFAULT_OUTPUT,
    HOROSCOPE_PERIODS,
    HOROSCOPE_SECTIONS,
    SHADIAO_TYPES,
    TYPE_LIST,
)
from ..config.settings import settings
from .date_utils import get_constellation
from .errors import CollectorError
from .message_builder import ColorFn, build_field
from .models import TemplateField

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/103.0.0.0 Safari/537.36"
)

WEATHER_URL = "http://d1.weather.com.cn/dingzhi/{area_id}.html"
WEATHER_REFERER = "http://www.weather.com.cn/weather1d/{area_id}.shtml"
CIBA_URL = "http://open.iciba.com/dsapi/"
HITOKOTO_URL = "https://v1.hitokoto.cn/"
SHADIAO_URL = "https://api.shadiao.pro/{kind}"
POETRY_URL = "https://v2.jinrishici.com/sentence"
FORTUNE_URL = "https://www.xzw.com/fortune/{constellation}/{period}.html"


async def fetch_or_default(label: str, func: Callable, default: Any, *args, **kwargs) -> Any:
    """
    在线程中执行阻塞的请求函数，失败时返回默认值

    Args:
        label: 日志中的数据源名称
        func: 请求并解析数据的函数，失败时抛异常
        default: 失败时返回的值（返回副本）

    Returns:
        func 的返回值或 default 的副本
    """
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except json.JSONDecodeError as e:
        logger.error(f"{label}: 序列化错误, error={e}")
    except Exception as e:
        logger.error(f"{label}: 发生错误, error={e}")
    return copy.deepcopy(default)


class DataCollector:
    """外部数据源采集器"""

    def __init__(
        self,
        http=None,
        timeout: Optional[float] = None,
        city_info: Optional[Dict] = None,
        chooser: Optional[Callable[[list], Any]] = None,
        color_fn: Optional[ColorFn] = None,
        poetry_token: Optional[str] = None,
    ):
        # 不传时直接用 requests 模块发请求
        self.http = http or requests
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.city_info = city_info
        self.chooser = chooser or random.choice
        self.color_fn = color_fn
        self.poetry_token = settings.JINRISHICI_TOKEN if poetry_token is None else poetry_token

    def _get(self, url: str, **kwargs) -> requests.Response:
        """GET 请求，状态码不是 200 时抛出 CollectorError"""
        headers = {"User-Agent": USER_AGENT, **(kwargs.pop("headers", None) or {})}
        response = self.http.get(url, headers=headers, timeout=self.timeout, **kwargs)
        if response.status_code != 200:
            raise CollectorError(f"请求失败: status={response.status_code}, url={url}")
        return response

    def _get_json(self, url: str, **kwargs) -> Dict:
        data = self._get(url, **kwargs).json()
        if not isinstance(data, dict):
            raise CollectorError(f"返回格式错误: {data!r}")
        return data

    # ---- 天气 ----

    def _fetch_weather(self, area_id: str) -> Dict:
        response = self._get(
            WEATHER_URL.format(area_id=area_id),
            params={"_": int(time.time() * 1000)},
            headers={"Referer": WEATHER_REFERER.format(area_id=area_id)},
        )
        response.encoding = 'utf-8'
        # 返回形如 var cityDZ101010100 ={"weatherinfo":{...}};var alarmDZ...
        segment = response.text.split(';')[0].split('=')
        weather = json.loads(segment[-1])
        info = weather.get('weatherinfo') if isinstance(weather, dict) else None
        if not info:
            raise CollectorError("找不到weatherinfo属性")
        return info

    async def get_weather(self, province: Optional[str], city: Optional[str]) -> Dict:
        """
        获取天气情况

        省份或城市在编码表中不存在时直接返回空字典，不发请求。
        """
        area_id = get_area_id(province, city, self.city_info)
        if not area_id:
            logger.error(f"配置文件中找不到相应的省份或城市: {province} {city}")
            return {}
        return await fetch_or_default("天气情况", self._fetch_weather, {}, area_id)

    # ---- 每日一句 / 一言 ----

    def _fetch_ciba(self) -> Dict:
        return self._get_json(CIBA_URL, headers={"Content-Type": "application/json"})

    async def get_ciba(self) -> Dict:
        """金山词霸每日一句"""
        return await fetch_or_default("金山词霸每日一句", self._fetch_ciba, {})

    def _fetch_one_talk(self, query: str) -> Dict:
        return self._get_json(HITOKOTO_URL, params={"c": query})

    async def get_one_talk(self, type_name: Optional[str] = None) -> Dict:
        """每日一言，type_name 为句子类型中文名，未匹配时随机"""
        matched = [item for item in TYPE_LIST if item['name'] == type_name]
        query = matched[0]['type'] if matched else self.chooser(TYPE_LIST)['type']
        return await fetch_or_default("每日一言", self._fetch_one_talk, {}, query)

    # ---- 沙雕APP ----

    def _fetch_shadiao(self, kind: str) -> str:
        data = self._get_json(SHADIAO_URL.format(kind=kind))
        return ((data.get('data') or {}).get('text')) or ''

    async def get_words_from_shadiao(self, kind: str) -> str:
        """从沙雕APP开放接口获取文案，kind 为 chp / pyq / du"""
        if kind not in SHADIAO_TYPES:
            logger.error(f"type参数有误，应为{', '.join(SHADIAO_TYPES)}的其中一个: {kind}")
            return ''
        return await fetch_or_default(SHADIAO_TYPES[kind], self._fetch_shadiao, '', kind)

    async def get_earthy_love_words(self) -> str:
        """土味情话（彩虹屁）"""
        return await self.get_words_from_shadiao('chp')

    async def get_moment_copyrighting(self) -> str:
        """朋友圈文案"""
        return await self.get_words_from_shadiao('pyq')

    async def get_poison_chicken_soup(self) -> str:
        """毒鸡汤"""
        return await self.get_words_from_shadiao('du')

    # ---- 古诗 ----

    def _fetch_poetry(self) -> Dict:
        headers = {"X-User-Token": self.poetry_token} if self.poetry_token else {}
        body = self._get_json(POETRY_URL, headers=headers)
        if body.get('status') != 'success':
            raise CollectorError(body.get('warning') or body.get('errMessage') or 'status 不是 success')
        data = body.get('data') or {}
        origin = data.get('origin') or {}
        return {
            "content": data.get('content', ''),
            "title": origin.get('title', ''),
            "author": origin.get('author', ''),
            "dynasty": origin.get('dynasty', ''),
        }

    async def get_poetry(self) -> Dict:
        """古诗古文: content / title / author / dynasty"""
        return await fetch_or_default("古诗古文", self._fetch_poetry, {})

    # ---- 星座运势 ----

    def _fetch_fortune_sections(self, url: str) -> Dict[int, str]:
        """抓取运势页面，返回 段落序号 -> 文本，缺失的段落不出现在结果里"""
        soup = BeautifulSoup(self._get(url).text, "html.parser")
        sections = {}
        for index in range(1, len(HOROSCOPE_SECTIONS) + 1):
            strong = soup.select_one(f".c_cont p strong.p{index}")
            sibling = strong.find_next_sibling() if strong else None
            if sibling is None:
                continue
            inner = re.sub(r'<small.*', '', sibling.decode_contents(), flags=re.S)
            text = BeautifulSoup(inner, "html.parser").get_text(strip=True)
            if text:
                sections[index] = text
        return sections

    async def get_constellation_fortune(self, date, date_type: Optional[str] = None) -> List[TemplateField]:
        """
        星座运势

        Args:
            date: 生日，"MM-DD" 或 "YYYY-MM-DD"
            date_type: 今日/明日/本周/本月/今年，不填则随机

        Returns:
            list: 5 个运势字段；时段不合法或没有生日时返回空列表
        """
        if not date_type:
            date_type = self.chooser(HOROSCOPE_PERIODS)

        if date_type not in HOROSCOPE_PERIODS:
            logger.error(f"星座日期类型horoscopeDateType错误, 请确认是否按要求填写: {date_type}")
            return []

        if not date:
            return []

        try:
            constellation = get_constellation(date)['en']
        except ValueError as e:
            logger.error(f"星座生日格式错误: {date}, error={e}")
            return []

        url = FORTUNE_URL.format(constellation=constellation, period=HOROSCOPE_PERIODS.index(date_type))
        sections = await fetch_or_default("星座运势", self._fetch_fortune_sections, {}, url)

        res = []
        for index, item in enumerate(HOROSCOPE_SECTIONS, start=1):
            value = sections.get(index)
            if not value:
                logger.error(f"{item['name']}获取失败")
                value = DEFAULT_OUTPUT['constellation_fortune']
            res.append(build_field(item['key'], f"{date_type}{item['name']}: {value}", self.color_fn))
        return res
