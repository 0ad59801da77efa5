"""
Состояние автомата: товары, режимы, записи продаж, результаты операций.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MachineState(str, Enum):
    IDLE = "idle"                 # ожидание монет
    HAS_FUNDS = "has_funds"       # есть баланс, ждём выбор
    DISPENSING = "dispensing"     # продажа в процессе (необратима)
    SOLD_OUT = "sold_out"         # выбран товар без остатка
    MAINTENANCE = "maintenance"   # сервисный режим


@dataclass
class Product:
    """Товар в слоте. Цена в минимальных единицах валюты."""
    product_id: str
    name: Optional[str]
    unit_price: int
    stock: int = 0
    is_hot: bool = False

    def take_one(self) -> None:
        self.stock = max(0, self.stock - 1)

    def restock(self, level: int) -> int:
        """Сбросить остаток до стандартного уровня. Возвращает прежний остаток."""
        before = self.stock
        self.stock = level
        return before

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


@dataclass
class ChangeResult:
    """Результат выдачи сдачи: разбивка по номиналам и недостача, если резерв не покрыл сумму."""
    requested: int
    coins: Dict[int, int] = field(default_factory=dict)  # номинал -> штук

    @property
    def dispensed(self) -> int:
        return sum(d * n for d, n in self.coins.items())

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - self.dispensed)

    @property
    def complete(self) -> bool:
        return self.shortfall == 0


@dataclass
class SaleRecord:
    """Завершённая продажа."""
    product_id: str
    list_price: int
    charged: int
    paid: int
    change: ChangeResult

    @property
    def short_changed(self) -> bool:
        return not self.change.complete


@dataclass
class OperationResult:
    """Исход внешней операции: принята ли, сообщение, возвраты, отчёт обслуживания."""
    accepted: bool
    message: str = ""
    refund: int = 0
    returned_coins: int = 0
    refund_pending: bool = False
    sale: Optional[SaleRecord] = None
    report: Optional[Any] = None


@dataclass
class IntegrityIssue:
    code: str
    message: str
    corrected: bool = False
    severity: str = "error"  # "error" | "warning"


@dataclass
class IntegrityReport:
    """Итог стартовой самопроверки. Предупреждения не делают отчёт неуспешным."""
    issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(i.severity == "error" for i in self.issues)

    def add(self, code: str, message: str, corrected: bool = False, severity: str = "error") -> None:
        self.issues.append(IntegrityIssue(code=code, message=message, corrected=corrected, severity=severity))

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]
