"""
Обработчики операций по режимам автомата.
Каждая операция задаётся таблицей MachineState -> функция(machine, ...); машина вызывает TABLE[state].
Недопустимый ввод не ошибка: результат accepted=False, состояние не меняется.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from ..logging_config import get_logger
from .maintenance import (
    MaintenanceReport,
    analyze_inventory,
    estimate_maintenance_cost,
    run_diagnostics,
)
from .state import MachineState, OperationResult

if TYPE_CHECKING:
    from .machine import VendingMachine

logger = get_logger(__name__)


def _rejected(message: str, **kwargs) -> OperationResult:
    return OperationResult(accepted=False, message=message, **kwargs)


def _unknown_coin(amount: int) -> OperationResult:
    logger.debug("Non-standard coin %d dropped", amount)
    return _rejected(f"Coin {amount} not accepted.")


# --- insert_funds ---

def idle_insert_funds(m: VendingMachine, amount: int) -> OperationResult:
    if not m.config.is_valid_coin(amount):
        return _unknown_coin(amount)
    m.balance += amount
    logger.info("Coin accepted: %d", amount)
    m.transition(MachineState.HAS_FUNDS)
    return OperationResult(accepted=True, message=f"Balance: {m.balance}.")


def has_funds_insert_funds(m: VendingMachine, amount: int) -> OperationResult:
    if not m.config.is_valid_coin(amount):
        return _unknown_coin(amount)
    m.balance += amount
    logger.info("Coin accepted: %d", amount)
    return OperationResult(accepted=True, message=f"Balance: {m.balance}.")


def dispensing_insert_funds(m: VendingMachine, amount: int) -> OperationResult:
    return _rejected("Sale in progress, insert coins later.", returned_coins=amount)


def sold_out_insert_funds(m: VendingMachine, amount: int) -> OperationResult:
    # Любая сумма принимается без проверки номинала и подлежит возврату по cancel
    m.balance += amount
    m.refund_pending = True
    return OperationResult(
        accepted=True,
        message="Sold out, press cancel for a refund.",
        refund_pending=True,
    )


def maintenance_insert_funds(m: VendingMachine, amount: int) -> OperationResult:
    logger.info("Maintenance mode, coin returned: %d", amount)
    return _rejected("Maintenance mode, coin returned.", returned_coins=amount)


# --- select_product ---

def idle_select_product(m: VendingMachine, product_id: str) -> OperationResult:
    return _rejected("Insert funds first.")


def has_funds_select_product(m: VendingMachine, product_id: str) -> OperationResult:
    product = m.inventory.get(product_id)
    if product is None:
        logger.debug("Unknown product id %r", product_id)
        return _rejected(f"Unknown product: {product_id}.")
    if product.stock <= 0:
        m.transition(MachineState.SOLD_OUT)
        return _rejected(f"{product.name} is sold out.")
    if m.balance < product.unit_price:
        return _rejected(f"Insufficient funds: balance {m.balance}, price {product.unit_price}.")
    m.selected_product = product
    m.transition(MachineState.DISPENSING)
    return m.finalize()


def busy_select_product(m: VendingMachine, product_id: str) -> OperationResult:
    return _rejected("Sale in progress, selection cannot change.")


def sold_out_select_product(m: VendingMachine, product_id: str) -> OperationResult:
    return _rejected("No stock, press cancel for a refund.")


def maintenance_select_product(m: VendingMachine, product_id: str) -> OperationResult:
    product = m.inventory.get(product_id)
    if product is None:
        return _rejected(f"Unknown product: {product_id}.")
    before = product.restock(m.config.restock_level)
    logger.info("Restocked %s: %d -> %d", product_id, before, product.stock)
    return OperationResult(accepted=True, message=f"Restocked {product_id} to {product.stock}.")


# --- dispense ---

def idle_dispense(m: VendingMachine) -> OperationResult:
    return _rejected("No product selected.")


def has_funds_dispense(m: VendingMachine) -> OperationResult:
    return _rejected("Select a product first.")


def dispensing_dispense(m: VendingMachine) -> OperationResult:
    return m.finalize()


def sold_out_dispense(m: VendingMachine) -> OperationResult:
    return _rejected("Nothing to dispense.")


def maintenance_dispense(m: VendingMachine) -> OperationResult:
    report = run_diagnostics(m.inventory, m.config)
    if report.ok:
        logger.info("Diagnostics passed")
    else:
        logger.warning("Diagnostics failures: %s", ", ".join(report.failures()))
    return OperationResult(accepted=True, message="Diagnostics complete.", report=report)


# --- cancel (возвращает сумму возврата) ---

def no_refund_cancel(m: VendingMachine) -> int:
    return 0


def refund_cancel(m: VendingMachine) -> int:
    return m.refund_balance()


def dispensing_cancel(m: VendingMachine) -> int:
    logger.info("Sale already in progress, cannot cancel")
    return 0


# --- enter_maintenance ---

def locked_enter_maintenance(m: VendingMachine, code: str) -> OperationResult:
    if code != m.config.maintenance_code:
        logger.debug("Wrong maintenance code")
        return _rejected("Maintenance code rejected.")
    refund = m.refund_balance() if m.balance > 0 else 0
    m.transition(MachineState.MAINTENANCE)
    return OperationResult(accepted=True, message="Maintenance mode.", refund=refund)


def busy_enter_maintenance(m: VendingMachine, code: str) -> OperationResult:
    return _rejected("Not available during a transaction.")


def maintenance_enter_maintenance(m: VendingMachine, code: str) -> OperationResult:
    report = MaintenanceReport(
        analysis=analyze_inventory(m.inventory, m.config.restock_level),
        estimated_cost=estimate_maintenance_cost(m.inventory, m.reserve.total_value()),
    )
    if report.urgent:
        logger.info("%d product(s) need restocking now: %s", len(report.urgent), ", ".join(report.urgent))
    return OperationResult(
        accepted=True,
        message=f"Estimated maintenance cost: {report.estimated_cost}.",
        report=report,
    )


S = MachineState

INSERT_FUNDS: Dict[MachineState, Callable[..., OperationResult]] = {
    S.IDLE: idle_insert_funds,
    S.HAS_FUNDS: has_funds_insert_funds,
    S.DISPENSING: dispensing_insert_funds,
    S.SOLD_OUT: sold_out_insert_funds,
    S.MAINTENANCE: maintenance_insert_funds,
}

SELECT_PRODUCT: Dict[MachineState, Callable[..., OperationResult]] = {
    S.IDLE: idle_select_product,
    S.HAS_FUNDS: has_funds_select_product,
    S.DISPENSING: busy_select_product,
    S.SOLD_OUT: sold_out_select_product,
    S.MAINTENANCE: maintenance_select_product,
}

DISPENSE: Dict[MachineState, Callable[..., OperationResult]] = {
    S.IDLE: idle_dispense,
    S.HAS_FUNDS: has_funds_dispense,
    S.DISPENSING: dispensing_dispense,
    S.SOLD_OUT: sold_out_dispense,
    S.MAINTENANCE: maintenance_dispense,
}

CANCEL: Dict[MachineState, Callable[..., int]] = {
    S.IDLE: no_refund_cancel,
    S.HAS_FUNDS: refund_cancel,
    S.DISPENSING: dispensing_cancel,
    S.SOLD_OUT: refund_cancel,
    S.MAINTENANCE: refund_cancel,
}

ENTER_MAINTENANCE: Dict[MachineState, Callable[..., OperationResult]] = {
    S.IDLE: locked_enter_maintenance,
    S.HAS_FUNDS: busy_enter_maintenance,
    S.DISPENSING: busy_enter_maintenance,
    S.SOLD_OUT: locked_enter_maintenance,
    S.MAINTENANCE: maintenance_enter_maintenance,
}
