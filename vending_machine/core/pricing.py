"""
Динамическое ценообразование: категория товара, давление остатка, защита по балансу.
Чистые функции над товаром, ничего не мутируют.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from .state import Product


class ProductCategory(str, Enum):
    COFFEE = "coffee"
    TEA = "tea"
    SODA = "soda"
    WATER = "water"
    GENERAL = "general"
    UNKNOWN = "unknown"


# Ключевые слова, включая названия из исходного (тайваньского) каталога
CATEGORY_KEYWORDS = (
    (ProductCategory.COFFEE, ("COFFEE", "LATTE", "咖啡", "拿鐵")),
    (ProductCategory.TEA, ("TEA", "茶", "烏龍")),
    (ProductCategory.SODA, ("COKE", "COLA", "SODA", "可樂", "汽水")),
    (ProductCategory.WATER, ("WATER", "水")),
)

OVERSTOCK_LEVEL = 15
SCARCE_LEVEL = 3
MEMBER_COFFEE_FACTOR = 0.85
SCARCE_FLOOR_FACTOR = 0.9
GUARD_BALANCE = 100
GUARD_PRICE = 40
BULK_MIN_QUANTITY = 2
BULK_FACTOR = 0.9


def classify(name: Optional[str]) -> ProductCategory:
    if name is None:
        return ProductCategory.UNKNOWN
    upper = name.upper()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in upper for k in keywords):
            return category
    return ProductCategory.GENERAL


class PricingEngine:
    """
    Итоговая цена = правила по порядку:
      1. категория (кофе для участника, чай при балансе > 50, газировка от 25);
      2. остаток (больше 15: скидка, 1..3: пол 90% от цены);
      3. защита по балансу/цене (> 100 или цена > 40): −5 не участнику, −10 участнику;
      4. пол: скидка шага 3 не опускает цену ниже list_price − 2
         (если цена уже была ниже до шага 3, остаётся прежней), затем [0, list_price];
      5. усечение до целого.
    """

    def price(self, product: Product, current_balance: int, is_member: bool = False) -> int:
        list_price = max(0, product.unit_price)
        running = float(list_price)

        category = classify(product.name)
        if category == ProductCategory.COFFEE:
            if is_member:
                running *= MEMBER_COFFEE_FACTOR
        elif category == ProductCategory.TEA:
            if current_balance > 50:
                running -= 5
        elif category == ProductCategory.SODA:
            if list_price >= 25:
                running -= 2

        stock = product.stock
        if stock > OVERSTOCK_LEVEL:
            running -= 5 if list_price > 30 else 2
        elif 0 < stock <= SCARCE_LEVEL:
            running = max(running, list_price * SCARCE_FLOOR_FACTOR)

        floor = list_price - 2
        if current_balance > GUARD_BALANCE or list_price > GUARD_PRICE:
            before_guard = running
            if is_member:
                running -= 10
            elif running >= floor:
                running -= 5
            running = max(running, min(before_guard, floor))

        running = min(max(running, 0.0), float(list_price))
        return int(running)

    def bulk_price(self, product: Product, quantity: int) -> int:
        """Сумма за quantity штук по прайсу; от двух штук 10% скидки."""
        if quantity <= 0:
            return 0
        total = max(0, product.unit_price) * quantity
        if quantity >= BULK_MIN_QUANTITY:
            return int(total * BULK_FACTOR)
        return total

    def marketing_tagline(self, product: Product) -> str:
        """Текст для витрины. На цену не влияет."""
        parts = []
        price = product.unit_price
        if price >= 40:
            parts.append("Premium treat")
        elif price <= 15:
            parts.append("Best value")
        parts.append("Warm and cozy" if product.is_hot else "Ice cold")
        category = classify(product.name)
        if category == ProductCategory.COFFEE:
            parts.append("wake-up boost")
        elif category == ProductCategory.TEA:
            parts.append("smooth brew")
        elif category == ProductCategory.SODA:
            parts.append("fizzy kick")
        else:
            parts.append("classic taste")
        return " - ".join(parts)
