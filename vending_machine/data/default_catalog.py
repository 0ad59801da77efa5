"""
Каталог по умолчанию: три слота с разными ценами и остатками.
"""
from vending_machine.core.state import Product

# id -> (название, цена, остаток, горячий)
DEFAULT_PRODUCTS = {
    "A1": ("Cola", 25, 10, False),
    "A2": ("Green Tea", 20, 5, False),
    "B1": ("Coffee", 35, 2, True),
}


def get_default_products() -> list[Product]:
    """Новые экземпляры на каждый вызов: автоматы не делят остатки."""
    return [
        Product(product_id=pid, name=name, unit_price=price, stock=stock, is_hot=hot)
        for pid, (name, price, stock, hot) in DEFAULT_PRODUCTS.items()
    ]
