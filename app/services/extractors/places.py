"""Gazetteer-based place detection."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

GAZETTEER = (
    # Cities
    "北京", "上海", "广州", "深圳", "杭州", "成都", "西安", "南京", "武汉", "重庆",
    "天津", "苏州", "长沙", "郑州", "青岛", "沈阳", "大连", "厦门", "福州", "哈尔滨",
    "济南", "石家庄", "长春", "昆明", "合肥", "南宁", "太原", "贵阳", "呼和浩特",
    "乌鲁木齐", "拉萨", "银川", "西宁", "海口", "三亚", "丽江", "大理", "桂林",
    "张家界", "伊犁", "吐鲁番", "哈密", "库尔勒", "阿克苏", "喀什", "和田", "阿勒泰",
    "塔城", "昌吉", "石河子", "舟山", "呼伦贝尔", "锡林郭勒", "鄂尔多斯", "阿拉善",
    # Mountains
    "黄山", "九寨沟", "峨眉山", "泰山", "华山", "庐山", "武夷山", "普陀山", "五台山",
    "武当山", "青城山", "长白山", "天山", "昆仑山", "喜马拉雅", "珠穆朗玛",
    # Landmarks and scenic areas
    "布达拉宫", "故宫", "天安门", "长城", "兵马俑", "西湖", "阳朔", "西双版纳",
    "香格里拉", "稻城亚丁", "莫高窟", "龙门石窟", "云冈石窟", "大足石刻", "乐山大佛",
    "都江堰", "乌镇", "周庄", "同里", "西塘", "宏村", "婺源", "凤凰古城", "平遥古城",
    "丽江古城", "大理古城", "鼓浪屿", "天涯海角", "亚龙湾", "蜈支洲岛", "涠洲岛",
    "长岛", "崇明岛", "千岛湖", "天池", "天山天池",
    # Lakes, rivers and deserts
    "泸沽湖", "洱海", "滇池", "青海湖", "纳木错", "茶卡盐湖", "镜泊湖", "松花江",
    "长江", "黄河", "珠江", "淮河", "太湖", "鄱阳湖", "洞庭湖", "洪泽湖", "巢湖",
    "羊卓雍错", "玛旁雍错", "色林错", "班公错", "察尔汗盐湖", "罗布泊", "塔克拉玛干",
    "腾格里", "巴丹吉林", "库布齐", "毛乌素", "科尔沁", "赛里木湖",
    # Grasslands and villages
    "那拉提", "巴音布鲁克", "喀纳斯", "禾木", "白哈巴", "可可托海", "喀拉峻", "昭苏",
    "特克斯",
    # Hangzhou West Lake area
    "灵隐寺", "西溪湿地", "雷峰塔", "断桥", "三潭印月", "苏堤", "白堤", "岳王庙",
    "六和塔", "虎跑", "龙井", "梅家坞", "九溪", "云栖竹径", "法喜寺", "净慈寺", "保俶塔",
    "宝石山", "太子湾", "花港观鱼", "曲院风荷", "平湖秋月", "断桥残雪", "柳浪闻莺",
    "双峰插云", "南屏晚钟", "雷峰夕照", "苏堤春晓",
)


def build_gazetteer_pattern(names: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a literal alternation; longer names win over their prefixes."""
    ordered = sorted(dict.fromkeys(names), key=len, reverse=True)
    return re.compile("|".join(re.escape(name) for name in ordered))


class PlaceExtractor:
    """Detect known place names in page HTML or note content."""

    def __init__(
        self,
        names: tuple[str, ...] = GAZETTEER,
        max_places: int = 10,
    ) -> None:
        self.pattern = build_gazetteer_pattern(names)
        self.max_places = max_places

    def extract_places(self, html: str, content: str = "") -> list[str]:
        """Return unique matches in first-seen order, capped at max_places.

        The raw HTML is searched first; content only when HTML has no match.
        """
        matches = self.pattern.findall(html or "")
        if not matches:
            matches = self.pattern.findall(content or "")
        places = list(dict.fromkeys(matches))[: self.max_places]
        if places:
            logger.debug("Gazetteer matched %d places", len(places))
        return places
