"""
Unit tests for wx_push/core/collectors.py

Every collector must return its default shape instead of raising
when the remote source is unreachable or returns something unexpected.
"""

import json
import unittest

import requests

from wx_push.config.defaults import DEFAULT_OUTPUT
from wx_push.core.collectors import USER_AGENT, DataCollector, fetch_or_default
from tests.mock_helpers import create_mock_response, create_mock_http, fixed_color

CITY_INFO = {"广东": {"广州": {"AREAID": "101280101"}}}

WEATHER_BODY = (
    'var cityDZ101280101 ={"weatherinfo":{"city":"101280101","cityname":"广州",'
    '"temp":"25℃","tempn":"18℃","weather":"多云","wd":"东北风","ws":"<3级"}};'
    'var alarmDZ101280101 ={"w":[]}'
)

FORTUNE_HTML = """
<html><body><div class="c_cont">
<p><strong class="p1">综合运势</strong><span>整体运势不错<small>（查看更多）</small></span></p>
<p><strong class="p2">爱情运势</strong><span>甜蜜</span></p>
<p><strong class="p3">事业学业</strong><span>顺利</span></p>
<p><strong class="p4">财富运势</strong><span>稳定</span></p>
<p><strong class="p5">健康运势</strong><span>注意休息</span></p>
</div></body></html>
"""


def make_collector(http, chooser=None):
    return DataCollector(
        http=http,
        timeout=5,
        city_info=CITY_INFO,
        chooser=chooser or (lambda items: items[0]),
        color_fn=fixed_color,
        poetry_token="token",
    )


class TestFetchOrDefault(unittest.IsolatedAsyncioTestCase):
    """Tests for the fetch_or_default() wrapper."""

    async def test_returns_value(self):
        result = await fetch_or_default("test", lambda x: x * 2, 0, 21)
        self.assertEqual(result, 42)

    async def test_returns_copy_of_default(self):
        default = {"a": []}

        def boom():
            raise RuntimeError("down")

        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await fetch_or_default("test", boom, default)
        self.assertEqual(result, default)
        self.assertIsNot(result, default)


class TestWeather(unittest.IsolatedAsyncioTestCase):
    """Tests for get_weather()."""

    async def test_unmapped_location_skips_request(self):
        http = create_mock_http()
        collector = make_collector(http)

        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await collector.get_weather("火星", "奥林匹斯")

        self.assertEqual(result, {})
        http.get.assert_not_called()

    async def test_parses_weatherinfo(self):
        http = create_mock_http(create_mock_response(text=WEATHER_BODY))
        collector = make_collector(http)

        result = await collector.get_weather("广东", "广州")

        self.assertEqual(result["weather"], "多云")
        self.assertEqual(result["temp"], "25℃")
        self.assertEqual(result["ws"], "<3级")
        call_kwargs = http.get.call_args[1]
        self.assertEqual(call_kwargs["timeout"], 5)
        self.assertIn("101280101", call_kwargs["headers"]["Referer"])
        self.assertEqual(call_kwargs["headers"]["User-Agent"], USER_AGENT)

    async def test_given_session_headers_untouched(self):
        session = requests.Session()
        session.get = create_mock_http(create_mock_response(text=WEATHER_BODY)).get
        original_agent = session.headers["User-Agent"]

        result = await make_collector(session).get_weather("广东", "广州")

        self.assertEqual(result["weather"], "多云")
        self.assertEqual(session.headers["User-Agent"], original_agent)
        self.assertEqual(session.get.call_args[1]["headers"]["User-Agent"], USER_AGENT)

    def test_defaults_to_requests_module(self):
        self.assertIs(DataCollector().http, requests)

    async def test_malformed_body(self):
        http = create_mock_http(create_mock_response(text="var x = {broken;"))
        result = await make_collector(http).get_weather("广东", "广州")
        self.assertEqual(result, {})

    async def test_missing_weatherinfo(self):
        http = create_mock_http(create_mock_response(text='var x ={"other":1};'))
        result = await make_collector(http).get_weather("广东", "广州")
        self.assertEqual(result, {})

    async def test_non_200(self):
        http = create_mock_http(create_mock_response(status_code=503, text=WEATHER_BODY))
        result = await make_collector(http).get_weather("广东", "广州")
        self.assertEqual(result, {})

    async def test_network_error(self):
        http = create_mock_http(side_effect=requests.ConnectionError("unreachable"))
        result = await make_collector(http).get_weather("广东", "广州")
        self.assertEqual(result, {})


class TestQuotes(unittest.IsolatedAsyncioTestCase):
    """Tests for iciba, hitokoto and shadiao collectors."""

    async def test_ciba_success(self):
        body = {"content": "Keep going.", "note": "继续前进。"}
        http = create_mock_http(create_mock_response(json_data=body))
        result = await make_collector(http).get_ciba()
        self.assertEqual(result["note"], "继续前进。")

    async def test_ciba_bad_json(self):
        error = json.JSONDecodeError("Expecting value", "", 0)
        http = create_mock_http(create_mock_response(json_data=error))
        result = await make_collector(http).get_ciba()
        self.assertEqual(result, {})

    async def test_one_talk_uses_preference(self):
        http = create_mock_http(create_mock_response(json_data={"hitokoto": "hi", "from": "src"}))
        result = await make_collector(http).get_one_talk("诗词")
        self.assertEqual(result["hitokoto"], "hi")
        self.assertEqual(http.get.call_args[1]["params"], {"c": "i"})

    async def test_one_talk_random_when_unknown(self):
        http = create_mock_http(create_mock_response(json_data={"hitokoto": "hi"}))
        collector = make_collector(http, chooser=lambda items: items[-1])
        await collector.get_one_talk("不存在")
        self.assertEqual(http.get.call_args[1]["params"], {"c": "l"})

    async def test_shadiao_success(self):
        http = create_mock_http(create_mock_response(json_data={"data": {"text": "你真好看"}}))
        result = await make_collector(http).get_earthy_love_words()
        self.assertEqual(result, "你真好看")
        self.assertTrue(http.get.call_args[0][0].endswith("/chp"))

    async def test_shadiao_missing_text(self):
        http = create_mock_http(create_mock_response(json_data={"data": {}}))
        self.assertEqual(await make_collector(http).get_poison_chicken_soup(), "")

    async def test_shadiao_invalid_kind(self):
        http = create_mock_http()
        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await make_collector(http).get_words_from_shadiao("xyz")
        self.assertEqual(result, "")
        http.get.assert_not_called()


class TestPoetry(unittest.IsolatedAsyncioTestCase):
    """Tests for get_poetry()."""

    async def test_success(self):
        body = {
            "status": "success",
            "data": {
                "content": "床前明月光",
                "origin": {"title": "静夜思", "author": "李白", "dynasty": "唐代"},
            },
        }
        http = create_mock_http(create_mock_response(json_data=body))

        result = await make_collector(http).get_poetry()

        self.assertEqual(result, {"content": "床前明月光", "title": "静夜思", "author": "李白", "dynasty": "唐代"})
        headers = http.get.call_args[1]["headers"]
        self.assertEqual(headers["X-User-Token"], "token")
        self.assertEqual(headers["User-Agent"], USER_AGENT)

    async def test_status_not_success(self):
        """HTTP 200 alone is not enough."""
        body = {"status": "error", "warning": "token invalid", "data": {"content": "x"}}
        http = create_mock_http(create_mock_response(json_data=body))
        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await make_collector(http).get_poetry()
        self.assertEqual(result, {})


class TestConstellationFortune(unittest.IsolatedAsyncioTestCase):
    """Tests for get_constellation_fortune()."""

    async def test_invalid_period(self):
        http = create_mock_http()
        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await make_collector(http).get_constellation_fortune("12-11", "未知")
        self.assertEqual(result, [])
        http.get.assert_not_called()

    async def test_invalid_period_without_date(self):
        with self.assertLogs("wx_push.core.collectors", level="ERROR"):
            result = await make_collector(create_mock_http()).get_constellation_fortune(None, "未知")
        self.assertEqual(result, [])

    async def test_missing_date(self):
        http = create_mock_http()
        result = await make_collector(http).get_constellation_fortune(None, "今日")
        self.assertEqual(result, [])
        http.get.assert_not_called()

    async def test_parses_sections(self):
        http = create_mock_http(create_mock_response(text=FORTUNE_HTML))

        result = await make_collector(http).get_constellation_fortune("12-11", "本周")

        self.assertEqual([item.name for item in result], [
            "comprehensive_horoscope",
            "love_horoscope",
            "career_horoscope",
            "wealth_horoscope",
            "healthy_horoscope",
        ])
        self.assertEqual(result[0].value, "本周综合运势: 整体运势不错")
        self.assertEqual(result[4].value, "本周健康运势: 注意休息")
        self.assertEqual(http.get.call_args[0][0], "https://www.xzw.com/fortune/sagittarius/2.html")

    async def test_missing_section_uses_default(self):
        html = FORTUNE_HTML.replace('<strong class="p3">事业学业</strong><span>顺利</span>', "")
        http = create_mock_http(create_mock_response(text=html))

        result = await make_collector(http).get_constellation_fortune("12-11", "今日")

        self.assertEqual(result[2].value, f"今日事业学业: {DEFAULT_OUTPUT['constellation_fortune']}")
        self.assertEqual(result[1].value, "今日爱情运势: 甜蜜")

    async def test_page_failure_uses_defaults(self):
        http = create_mock_http(side_effect=requests.Timeout("slow"))

        result = await make_collector(http).get_constellation_fortune("12-11", "今年")

        self.assertEqual(len(result), 5)
        for item in result:
            self.assertTrue(item.value.endswith(DEFAULT_OUTPUT["constellation_fortune"]))

    async def test_random_period(self):
        http = create_mock_http(create_mock_response(text=FORTUNE_HTML))
        collector = make_collector(http, chooser=lambda items: items[3])

        result = await collector.get_constellation_fortune("12-11")

        self.assertTrue(result[0].value.startswith("本月"))
        self.assertTrue(http.get.call_args[0][0].endswith("/3.html"))


if __name__ == "__main__":
    unittest.main()
