"""
Автомат: баланс, выбранный товар, текущий режим, пять внешних операций.
Операции маршрутизируются в обработчики режима (states.py); продажа завершается в finalize().
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..config import MachineConfig
from ..logging_config import get_logger
from .change import ChangeAllocator, CoinReserve
from .coins import build_coin_specs
from .pricing import PricingEngine
from .state import (
    IntegrityReport,
    MachineState,
    OperationResult,
    Product,
    SaleRecord,
)
from . import states

logger = get_logger(__name__)


def _build_inventory(products: Union[Mapping[str, Product], Iterable[Product]]) -> Dict[str, Product]:
    if isinstance(products, Mapping):
        return dict(products)
    return {p.product_id: p for p in products}


class VendingMachine:
    """
    Один покупатель, одна транзакция за раз; всё состояние в памяти.
    Нарушения данных каталога исправляются стартовой самопроверкой, а не исключениями.
    """
    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        products: Optional[Union[Mapping[str, Product], Iterable[Product]]] = None,
        is_member: bool = False,
    ):
        self.config = config or MachineConfig()
        self.config.validate()
        if products is None:
            from vending_machine.data import get_default_products
            products = get_default_products()
        self.inventory: Dict[str, Product] = _build_inventory(products)
        self.allocator = ChangeAllocator(
            CoinReserve(self.config.initial_reserve, self.config.sorted_denominations),
            safety_threshold=self.config.safety_threshold,
            audit_threshold=self.config.audit_threshold,
            coin_specs=build_coin_specs(self.config.coin_profiles),
        )
        self.pricing = PricingEngine()
        self.is_member = is_member

        self.state = MachineState.IDLE
        self.balance = 0
        self.selected_product: Optional[Product] = None
        self.refund_pending = False

        self.sales: List[SaleRecord] = []
        self.refunds_total = 0

        self.integrity = self.perform_self_check()

    @property
    def reserve(self) -> CoinReserve:
        return self.allocator.reserve

    def transition(self, new_state: MachineState) -> None:
        if new_state != self.state:
            logger.debug("State %s -> %s", self.state.value, new_state.value)
        if new_state != MachineState.SOLD_OUT:
            self.refund_pending = False
        self.state = new_state

    # --- внешние операции ---

    def insert_funds(self, amount: int) -> OperationResult:
        if amount <= 0:
            return OperationResult(accepted=False, message="Nothing inserted.")
        return states.INSERT_FUNDS[self.state](self, amount)

    def select_product(self, product_id: str) -> OperationResult:
        return states.SELECT_PRODUCT[self.state](self, product_id)

    def dispense(self) -> OperationResult:
        return states.DISPENSE[self.state](self)

    def cancel(self) -> int:
        """Отмена. Возвращает сумму возврата покупателю."""
        return states.CANCEL[self.state](self)

    def enter_maintenance(self, code: str) -> OperationResult:
        return states.ENTER_MAINTENANCE[self.state](self, code)

    # --- внутренние шаги ---

    def refund_balance(self) -> int:
        refund = self.balance
        self.balance = 0
        self.refunds_total += refund
        if refund:
            logger.info("Refunded %d", refund)
        self.transition(MachineState.IDLE)
        return refund

    def quote(self, product_id: str) -> Optional[int]:
        """Цена товара для текущего баланса (для витрины)."""
        product = self.inventory.get(product_id)
        if product is None:
            return None
        return self.pricing.price(product, self.balance, self.is_member)

    def finalize(self) -> OperationResult:
        """
        Превращает выбор в продажу. Цена считается один раз от текущего баланса;
        списание, остаток, сдача и обнуление баланса: вместе или никак.
        """
        product = self.selected_product
        self.selected_product = None
        if product is None:
            self.transition(MachineState.HAS_FUNDS if self.balance > 0 else MachineState.IDLE)
            return OperationResult(accepted=False, message="No product selected.")
        if not product.in_stock:
            self.transition(MachineState.SOLD_OUT)
            return OperationResult(accepted=False, message=f"{product.name} is sold out.")

        charge = self.pricing.price(product, self.balance, self.is_member)
        if self.balance < charge:
            self.transition(MachineState.HAS_FUNDS)
            return OperationResult(
                accepted=False,
                message=f"Insufficient funds: balance {self.balance}, price {charge}.",
            )

        paid = self.balance
        product.take_one()
        change = self.allocator.make_change(paid - charge)
        self.balance = 0
        sale = SaleRecord(
            product_id=product.product_id,
            list_price=product.unit_price,
            charged=charge,
            paid=paid,
            change=change,
        )
        self.sales.append(sale)
        self.transition(MachineState.IDLE)
        logger.info(
            "Sold %s for %d (paid %d, change %d%s)",
            product.product_id, charge, paid, change.dispensed,
            f", short {change.shortfall}" if change.shortfall else "",
        )
        message = f"Dispensed {product.name}. Change: {change.dispensed}."
        if not change.complete:
            message += f" Change short by {change.shortfall}, please contact the operator."
        return OperationResult(accepted=True, message=message, sale=sale)

    def perform_self_check(self) -> IntegrityReport:
        """
        Стартовая проверка инвариантов: ключ == id, цена/остаток/баланс >= 0.
        Что можно, исправляется на месте и попадает в отчёт.
        """
        report = IntegrityReport()
        if not self.inventory:
            report.add("EMPTY_INVENTORY", "Inventory is empty", severity="warning")

        # Повторяем, пока ключи освобождаются: {"X": B, "B": C} сходится за два прохода
        rekeyed = True
        while rekeyed:
            rekeyed = False
            for key in list(self.inventory):
                product = self.inventory[key]
                if key != product.product_id and product.product_id not in self.inventory:
                    del self.inventory[key]
                    self.inventory[product.product_id] = product
                    report.add("ID_MISMATCH", f"Slot {key} re-keyed to {product.product_id}", corrected=True)
                    rekeyed = True

        for key, product in self.inventory.items():
            if key != product.product_id:
                report.add("ID_MISMATCH", f"Slot {key} holds {product.product_id}, key already taken")
            if product.unit_price < 0:
                report.add("NEGATIVE_PRICE", f"{product.product_id} price {product.unit_price} set to 0", corrected=True)
                product.unit_price = 0
            elif product.unit_price == 0:
                report.add("FREE_PRODUCT", f"{product.product_id} has price 0", severity="warning")
            if product.stock < 0:
                report.add("NEGATIVE_STOCK", f"{product.product_id} stock {product.stock} set to 0", corrected=True)
                product.stock = 0

        if self.balance < 0:
            report.add("NEGATIVE_BALANCE", f"Balance {self.balance} set to 0", corrected=True)
            self.balance = 0
        elif self.balance > self.config.balance_warning_limit:
            report.add("BALANCE_TOO_HIGH", f"Balance {self.balance} is implausibly high", severity="warning")

        for issue in report.issues:
            logger.warning("Self-check [%s]: %s", issue.code, issue.message)
        return report
