"""
Метрики сессии: продажи, выручка, сдача и её недостача, возвраты.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from vending_machine.core.machine import VendingMachine


@dataclass
class SessionMetrics:
    units_sold: int = 0
    revenue: int = 0
    change_dispensed: int = 0
    change_shortfall: int = 0
    short_change_sales: int = 0  # продажи с неполной сдачей
    refunds: int = 0
    steps: int = 0
    op_count: Dict[str, int] = field(default_factory=dict)
    units_by_product: Dict[str, int] = field(default_factory=dict)
    final_state: str = ""


def compute_metrics(machine: VendingMachine, steps: int = 0, op_count: Dict[str, int] | None = None) -> SessionMetrics:
    m = SessionMetrics(
        refunds=machine.refunds_total,
        steps=steps,
        op_count=dict(op_count or {}),
        final_state=machine.state.value,
    )
    for sale in machine.sales:
        m.units_sold += 1
        m.revenue += sale.charged
        m.change_dispensed += sale.change.dispensed
        m.change_shortfall += sale.change.shortfall
        if sale.short_changed:
            m.short_change_sales += 1
        m.units_by_product[sale.product_id] = m.units_by_product.get(sale.product_id, 0) + 1
    return m
