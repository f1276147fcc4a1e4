"""Static site copy shown on the home page and in navigation.

Every user-facing string is provided in Korean (``ko``) and English (``en``).
"""

from __future__ import annotations

from typing import Any

from somang.schemas.post import Category

CHURCH_NAME = {"ko": "동서울소망교회", "en": "East Seoul Somang Church"}

CATEGORY_NAMES: dict[Category, dict[str, str]] = {
    Category.NEWS: {"ko": "교회소식", "en": "Church News"},
    Category.SERMON: {"ko": "설교말씀", "en": "Sermons"},
    Category.ELEMENTARY: {"ko": "유초등부", "en": "Elementary"},
    Category.YOUTH: {"ko": "중고등부", "en": "Youth"},
    Category.YOUNG_ADULT: {"ko": "청년부", "en": "Young Adults"},
    Category.ADULT: {"ko": "장년부", "en": "Adults"},
}

HOME_CONTENT: dict[str, Any] = {
    "hero": {
        "title": {
            "ko": "동서울소망교회에 오신 것을 환영합니다",
            "en": "Welcome to East Seoul Somang Church",
        },
        "subtitle": {
            "ko": "하나님의 사랑과 은혜가 넘치는 교회",
            "en": "A church overflowing with God's love and grace",
        },
        "highlights": [
            {
                "label": {"ko": "주일예배", "en": "Sunday Worship"},
                "time": {"ko": "오전 11시", "en": "11:00 AM"},
            },
            {
                "label": {"ko": "수요예배", "en": "Wednesday Worship"},
                "time": {"ko": "오후 7시", "en": "7:00 PM"},
            },
        ],
    },
    "about": {
        "title": {"ko": "교회 소개", "en": "About Us"},
        "body": {
            "ko": (
                "동서울소망교회는 하나님의 말씀을 중심으로 하는 교회입니다. "
                "모든 성도가 하나님의 사랑 안에서 성장하고, 지역사회에 빛과 소금의 "
                "역할을 감당하는 교회가 되고자 합니다."
            ),
            "en": (
                "East Seoul Somang Church is centered on the Word of God. "
                "We long for every member to grow in God's love and for our church "
                "to be salt and light in the local community."
            ),
        },
        "values": [
            {"ko": "말씀 중심의 예배", "en": "Word-centered worship"},
            {"ko": "연령별 맞춤 교육", "en": "Education for every age"},
            {"ko": "지역사회 섬김", "en": "Serving our community"},
        ],
    },
    "services": {
        "title": {"ko": "예배 시간", "en": "Worship Times"},
        "items": [
            {
                "name": {"ko": "주일 대예배", "en": "Sunday Service"},
                "time": {"ko": "매주 일요일 오전 11:00", "en": "Sundays 11:00 AM"},
            },
            {
                "name": {"ko": "수요 기도회", "en": "Wednesday Prayer Meeting"},
                "time": {"ko": "매주 수요일 오후 7:00", "en": "Wednesdays 7:00 PM"},
            },
            {
                "name": {"ko": "새벽 기도회", "en": "Early Morning Prayer"},
                "time": {"ko": "매일 오전 5:30", "en": "Daily 5:30 AM"},
            },
        ],
    },
    "contact": {
        "title": {"ko": "연락처 및 위치", "en": "Contact & Location"},
        "address": {"ko": "서울 중랑구 겸재로 154", "en": "154 Gyeomjae-ro, Jungnang-gu, Seoul"},
        "phone": "02-435-1992",
        "email": "info@dongseoulchurch.org",
        "directions_title": {"ko": "오시는 길", "en": "Directions"},
    },
}


def category_display_name(category: str, language: str = "ko") -> str:
    """Return the board title for ``category``; unknown boards get an empty title."""
    parsed = Category.parse(category)
    if parsed is None:
        return ""
    names = CATEGORY_NAMES[parsed]
    return names.get(language, names["ko"])


def navigation() -> list[dict[str, Any]]:
    """Return the board navigation entries in display order."""
    return [
        {
            "name": category.value,
            "display_name": dict(names),
            "path": f"/board/{category.value}",
        }
        for category, names in CATEGORY_NAMES.items()
    ]


def home_page() -> dict[str, Any]:
    """Return the home page copy together with the church name and navigation."""
    return {"church_name": dict(CHURCH_NAME), "navigation": navigation(), **HOME_CONTENT}
