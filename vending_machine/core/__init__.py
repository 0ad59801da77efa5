from .state import (
    MachineState,
    Product,
    ChangeResult,
    SaleRecord,
    OperationResult,
    IntegrityReport,
)
from .change import CoinReserve, ChangeAllocator, ReserveBand
from .pricing import PricingEngine, ProductCategory, classify
from .machine import VendingMachine

__all__ = [
    "MachineState",
    "Product",
    "ChangeResult",
    "SaleRecord",
    "OperationResult",
    "IntegrityReport",
    "CoinReserve",
    "ChangeAllocator",
    "ReserveBand",
    "PricingEngine",
    "ProductCategory",
    "classify",
    "VendingMachine",
]
