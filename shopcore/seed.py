"""Bundled demo catalog."""

from __future__ import annotations

PRODUCT_RECORDS: list[dict] = [
    {
        "id": "lap-911x-4060",
        "category": "laptops",
        "brand": "THUNDEROBOT",
        "name": "THUNDEROBOT 911X — RTX 4060 / Ryzen 7",
        "price_base": 649000,
        "old_price_base": 699000,
        "availability": "preorder",
        "preorder_days": 8,
        "tags": ["RTX 4060", "Ryzen 7", "16GB", "512GB", "15.6", "165Hz"],
        "specs": {
            "cpu": "Ryzen 7",
            "gpu": "RTX 4060",
            "ram": "16GB",
            "ssd": "512GB",
            "screen": "15.6",
            "hz": "165",
            "matrix": "IPS",
            "os": "No OS",
        },
    },
    {
        "id": "lap-g15-4070",
        "category": "laptops",
        "brand": "THUNDEROBOT",
        "name": "THUNDEROBOT G15 — RTX 4070 / i7",
        "price_base": 899000,
        "availability": "in_stock",
        "preorder_days": 8,
        "tags": ["RTX 4070", "i7", "32GB", "1TB", "16", "240Hz"],
        "specs": {
            "cpu": "Core i7",
            "gpu": "RTX 4070",
            "ram": "32GB",
            "ssd": "1TB",
            "screen": "16",
            "hz": "240",
            "matrix": "IPS",
            "os": "Windows",
        },
    },
    {
        "id": "per-mouse-x1",
        "category": "periphery",
        "brand": "LogiPro",
        "name": "Игровая мышь X1 (RGB)",
        "price_base": 18990,
        "old_price_base": 24990,
        "availability": "in_stock",
        "tags": ["Мышь", "RGB", "12000 DPI"],
        "specs": {"type": "mouse"},
    },
    {
        "id": "per-kb-mech",
        "category": "periphery",
        "brand": "KeyForge",
        "name": "Механическая клавиатура (Hot-swap)",
        "price_base": 34990,
        "availability": "preorder",
        "tags": ["Клавиатура", "Hot-swap", "TKL"],
        "specs": {"type": "keyboard"},
    },
    {
        "id": "app-kettle",
        "category": "appliances",
        "brand": "HomeLite",
        "name": "Электрочайник 1.7L (сталь)",
        "price_base": 15990,
        "availability": "in_stock",
        "tags": ["1.7L", "Сталь"],
        "specs": {"type": "kettle"},
    },
    {
        "id": "cos-laser-mini",
        "category": "cosmo",
        "brand": "DermaPro",
        "name": "Диодный лазер (компакт)",
        "price_base": 1250000,
        "availability": "preorder",
        "requires_quote": True,
        "notice_text": "Перед покупкой требуется консультация специалиста. Уточните противопоказания.",
        "tags": ["Запрос КП", "Документы"],
        "specs": {"type": "cosmo_device"},
    },
    {
        "id": "med-ecg-12",
        "category": "medical",
        "brand": "MedLine",
        "name": "ЭКГ аппарат 12 каналов",
        "price_base": 890000,
        "availability": "preorder",
        "requires_quote": True,
        "notice_text": "Использовать по назначению. Требуются документы/рег. удостоверение (если применимо).",
        "tags": ["Запрос КП", "Сертификаты"],
        "specs": {"type": "medical_device"},
    },
]

CATEGORY_TITLES: dict[str, str] = {
    "laptops": "Игровые ноутбуки",
    "periphery": "Периферия",
    "appliances": "Мелко-бытовая техника",
    "cosmo": "Косметическое оборудование",
    "medical": "Медицинское оборудование",
    "b2b": "Юр. лица",
}

CATALOG_TITLE = "Каталог"
