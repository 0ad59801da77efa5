from .default_catalog import DEFAULT_PRODUCTS, get_default_products

__all__ = ["DEFAULT_PRODUCTS", "get_default_products"]
