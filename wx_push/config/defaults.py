"""
默认值与常量表
"""

# 数据源获取失败时各字段的兜底值，key 与模板字段名一致
DEFAULT_OUTPUT = {
    "weather": "未知",
    "min_temperature": "--",
    "max_temperature": "--",
    "wind_direction": "未知",
    "wind_scale": "未知",
    "birthday_message": "",
    "note_en": "Everything will be fine.",
    "note_ch": "一切都会好起来的。",
    "one_talk": "愿你三冬暖，愿你春不寒。",
    "talk_from": "网络",
    "earthy_love_words": "今天也要开开心心的哦",
    "moment_copyrighting": "生活明朗，万物可爱。",
    "poison_chicken_soup": "努力不一定成功，但不努力一定很轻松。",
    "poetry_content": "人生若只如初见，何事秋风悲画扇。",
    "poetry_author": "纳兰性德",
    "poetry_dynasty": "清代",
    "poetry_title": "木兰花·拟古决绝词柬友",
    "constellation_fortune": "今天运势平稳，保持好心情~",
}

# 每日一言句子类型
TYPE_LIST = [
    {"name": "动画", "type": "a"},
    {"name": "漫画", "type": "b"},
    {"name": "游戏", "type": "c"},
    {"name": "文学", "type": "d"},
    {"name": "原创", "type": "e"},
    {"name": "来自网络", "type": "f"},
    {"name": "其他", "type": "g"},
    {"name": "影视", "type": "h"},
    {"name": "诗词", "type": "i"},
    {"name": "网易云", "type": "j"},
    {"name": "哲学", "type": "k"},
    {"name": "抖机灵", "type": "l"},
]

WEEK_LIST = ["星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日"]

# 星座运势时段，下标即请求地址中的时段编号
HOROSCOPE_PERIODS = ["今日", "明日", "本周", "本月", "今年"]

HOROSCOPE_SECTIONS = [
    {"name": "综合运势", "key": "comprehensiveHoroscope"},
    {"name": "爱情运势", "key": "loveHoroscope"},
    {"name": "事业学业", "key": "careerHoroscope"},
    {"name": "财富运势", "key": "wealthHoroscope"},
    {"name": "健康运势", "key": "healthyHoroscope"},
]

# 沙雕APP开放接口类型
SHADIAO_TYPES = {
    "chp": "土味情话(彩虹屁)",
    "pyq": "朋友圈文案",
    "du": "毒鸡汤",
}

NONE_PLACEHOLDER = "无"
