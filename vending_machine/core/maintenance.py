"""
Сервисный режим: диагностика подсистем, анализ запасов, оценка стоимости обслуживания.
Функции без состояния: только отчёты, автомат не меняют.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from ..config import MachineConfig
from .state import Product

SUBSYSTEMS = ("POWER_UNIT", "COOLING_SYSTEM", "COIN_MECH", "DISPENSER_MOTOR", "CONNECTIVITY")

VOLTAGE_RANGE = (100, 120)
MAX_COOLER_TEMPERATURE = 10

BASE_SERVICE_COST = 500
BULK_RESTOCK_COST = 300
RESTOCK_COST = 100
COIN_REFILL_COST = 200
COIN_REFILL_BELOW = 100


@dataclass
class SubsystemStatus:
    name: str
    ok: bool
    detail: str


@dataclass
class DiagnosticsReport:
    subsystems: List[SubsystemStatus] = field(default_factory=list)
    slots: Dict[str, str] = field(default_factory=dict)  # product_id -> "ok" | "skipped"

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.subsystems)

    def failures(self) -> List[str]:
        return [s.name for s in self.subsystems if not s.ok]


@dataclass
class SlotAnalysis:
    product_id: str
    name: str
    stock: int
    score: float
    status: str  # "URGENT" | "WATCH" | "OK"


@dataclass
class MaintenanceReport:
    """Отчёт повторного входа в сервисный режим."""
    analysis: List[SlotAnalysis]
    estimated_cost: int

    @property
    def urgent(self) -> List[str]:
        return [a.product_id for a in self.analysis if a.status == "URGENT"]


def check_subsystem(code: str, config: MachineConfig) -> SubsystemStatus:
    if code == "POWER_UNIT":
        v = config.supply_voltage
        if VOLTAGE_RANGE[0] <= v <= VOLTAGE_RANGE[1]:
            return SubsystemStatus(code, True, f"voltage stable ({v}V)")
        return SubsystemStatus(code, False, f"voltage out of range ({v}V)")
    if code == "COOLING_SYSTEM":
        t = config.cooler_temperature
        if t > MAX_COOLER_TEMPERATURE:
            return SubsystemStatus(code, False, f"temperature too high ({t}C)")
        if t < 0:
            return SubsystemStatus(code, False, f"frost risk ({t}C)")
        return SubsystemStatus(code, True, f"cooling normal ({t}C)")
    if code == "COIN_MECH":
        return SubsystemStatus(code, True, "sorter clean, anti-fishing gate ok")
    if code == "DISPENSER_MOTOR":
        return SubsystemStatus(code, True, "x/y motors ok, drop sensor ok")
    if code == "CONNECTIVITY":
        wifi, cell = config.wifi_online, config.cellular_online
        if wifi and cell:
            return SubsystemStatus(code, True, "dual link")
        if wifi:
            return SubsystemStatus(code, True, "wi-fi only")
        if cell:
            return SubsystemStatus(code, True, "cellular only")
        return SubsystemStatus(code, False, "offline")
    return SubsystemStatus(code, False, "unknown subsystem")


def run_diagnostics(inventory: Mapping[str, Product], config: MachineConfig) -> DiagnosticsReport:
    """Глубокий скан: все подсистемы + тест каждого слота с товаром."""
    report = DiagnosticsReport()
    for code in SUBSYSTEMS:
        report.subsystems.append(check_subsystem(code, config))
    for product_id, product in inventory.items():
        report.slots[product_id] = "ok" if product.stock > 0 else "skipped"
    return report


def restock_priority(product: Product, restock_level: int) -> float:
    missing = restock_level - product.stock
    score = missing * 10.0
    if product.unit_price >= 30:
        score *= 1.5
    if product.is_hot:
        score += 20
    if product.stock == 0:
        score += 50
    return score


def analyze_inventory(inventory: Mapping[str, Product], restock_level: int) -> List[SlotAnalysis]:
    out = []
    for product_id, product in inventory.items():
        score = restock_priority(product, restock_level)
        if score > 100:
            status = "URGENT"
        elif score > 50:
            status = "WATCH"
        else:
            status = "OK"
        out.append(SlotAnalysis(
            product_id=product_id,
            name=product.name or "",
            stock=product.stock,
            score=score,
            status=status,
        ))
    return out


def estimate_maintenance_cost(inventory: Mapping[str, Product], reserve_value: int) -> int:
    cost = BASE_SERVICE_COST
    empty_slots = sum(1 for p in inventory.values() if p.stock == 0)
    if empty_slots > 3:
        cost += BULK_RESTOCK_COST
    elif empty_slots > 0:
        cost += RESTOCK_COST
    if reserve_value < COIN_REFILL_BELOW:
        cost += COIN_REFILL_COST
    return cost
