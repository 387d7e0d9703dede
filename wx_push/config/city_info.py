"""
省份/城市 -> 中国天气网区域编码
"""

CITY_INFO = {
    "北京": {
        "北京": {"AREAID": "101010100"},
        "海淀": {"AREAID": "101010200"},
        "朝阳": {"AREAID": "101010300"},
    },
    "上海": {
        "上海": {"AREAID": "101020100"},
        "浦东": {"AREAID": "101020600"},
    },
    "天津": {
        "天津": {"AREAID": "101030100"},
    },
    "重庆": {
        "重庆": {"AREAID": "101040100"},
    },
    "广东": {
        "广州": {"AREAID": "101280101"},
        "深圳": {"AREAID": "101280601"},
        "珠海": {"AREAID": "101280701"},
        "佛山": {"AREAID": "101280800"},
        "东莞": {"AREAID": "101281601"},
    },
    "浙江": {
        "杭州": {"AREAID": "101210101"},
        "宁波": {"AREAID": "101210401"},
        "温州": {"AREAID": "101210701"},
    },
    "江苏": {
        "南京": {"AREAID": "101190101"},
        "苏州": {"AREAID": "101190401"},
        "无锡": {"AREAID": "101190201"},
    },
    "四川": {
        "成都": {"AREAID": "101270101"},
    },
    "湖北": {
        "武汉": {"AREAID": "101200101"},
    },
    "湖南": {
        "长沙": {"AREAID": "101250101"},
    },
    "陕西": {
        "西安": {"AREAID": "101110101"},
    },
    "福建": {
        "福州": {"AREAID": "101230101"},
        "厦门": {"AREAID": "101230201"},
    },
    "山东": {
        "济南": {"AREAID": "101120101"},
        "青岛": {"AREAID": "101120201"},
    },
    "河南": {
        "郑州": {"AREAID": "101180101"},
    },
}


def get_area_id(province: str, city: str, city_info: dict = None):
    """查找区域编码，找不到时返回 None"""
    table = CITY_INFO if city_info is None else city_info
    return (table.get(province) or {}).get(city, {}).get('AREAID')
