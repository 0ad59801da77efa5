"""Снимки состояния автомата для трасс и экспорта."""
from __future__ import annotations

from typing import Any, Dict

from vending_machine.core.machine import VendingMachine


def machine_snapshot(machine: VendingMachine) -> Dict[str, Any]:
    """Компактный снимок: режим, баланс, остатки, резерв монет."""
    return {
        "state": machine.state.value,
        "balance": machine.balance,
        "refund_pending": machine.refund_pending,
        "inventory": {
            pid: {"name": p.name, "price": p.unit_price, "stock": p.stock}
            for pid, p in machine.inventory.items()
        },
        "reserve": {str(d): n for d, n in machine.reserve.as_dict().items()},
        "reserve_value": machine.reserve.total_value(),
        "sales": len(machine.sales),
    }
