"""Item categories and keyword heuristics for item classification."""

from enum import Enum


class Category(str, Enum):
    """Coarse consumption buckets assigned to invoice items."""

    BEVERAGE = "飲料"
    SNACK = "點心零食"
    MEAL = "餐食"
    FRESH_FOOD = "生鮮食品"
    DAILY_NECESSITIES = "日用品"
    HEALTH = "保健用品"
    TRANSPORTATION = "交通"
    CLOTHING = "服飾"
    ELECTRONICS = "3C電子"
    STATIONERY = "文具書籍"
    OTHER = "其他"


# Order matters: the first group with a matching keyword wins, so e.g.
# "水果" lands in BEVERAGE via "水" before FRESH_FOOD is tested.
CATEGORY_KEYWORDS: list[tuple[Category, tuple[str, ...]]] = [
    (
        Category.BEVERAGE,
        ("飲料", "咖啡", "茶", "果汁", "汽水", "可樂", "奶茶", "豆漿", "水"),
    ),
    (
        Category.SNACK,
        ("麵包", "蛋糕", "餅乾", "糖果", "巧克力", "冰淇淋", "零食", "洋芋片"),
    ),
    (
        Category.MEAL,
        ("便當", "飯", "麵", "湯", "雞腿", "排骨", "魚", "肉", "蛋", "菜", "炒", "燉"),
    ),
    (
        Category.FRESH_FOOD,
        ("蔬菜", "水果", "肉類", "海鮮", "牛奶", "雞蛋", "豆腐", "青菜"),
    ),
    (
        Category.DAILY_NECESSITIES,
        ("衛生紙", "洗髮", "沐浴", "牙膏", "牙刷", "洗衣", "清潔", "毛巾", "肥皂"),
    ),
    (
        Category.HEALTH,
        ("藥", "維他命", "保健", "營養", "膠囊", "錠"),
    ),
    (
        Category.TRANSPORTATION,
        ("油", "汽油", "停車", "過路費", "捷運", "公車", "計程車", "機車"),
    ),
    (
        Category.CLOTHING,
        ("衣", "褲", "鞋", "襪", "帽", "包"),
    ),
    (
        Category.ELECTRONICS,
        # Names are lower-cased before matching, so "3C" never matches
        ("手機", "電腦", "充電", "耳機", "電池", "3C"),
    ),
    (
        Category.STATIONERY,
        ("書", "筆", "紙", "文具", "雜誌", "報紙"),
    ),
]


def categorize_item(item_name: str) -> str:
    """
    Classify an item name into a category by keyword match.

    Args:
        item_name: Free-text item name from a D-line

    Returns:
        Category value of the first matching keyword group, or "其他"
    """
    name = (item_name or "").lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category.value

    return Category.OTHER.value
