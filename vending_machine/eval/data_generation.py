"""
Случайные сессии для нагрузочных прогонов и экспорт трасс в JSONL.
Форматы: "trajectory" (строка = сессия целиком), "steps" (строка = шаг со снимком состояния).
"""
from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from vending_machine.config import MachineConfig
from vending_machine.core.machine import VendingMachine
from vending_machine.core.state import MachineState
from .metrics import SessionMetrics
from .runner import StepRecord, run_session

# Заведомо невалидные монеты и товары
JUNK_COINS = (2, 3, 20, 100)
JUNK_PRODUCT = "Z9"


def random_policy(machine: VendingMachine, rng: random.Random) -> Optional[Dict[str, Any]]:
    """
    Покупатель со случайным поведением: в основном монеты и выбор товара,
    иногда отмена, мусорный ввод, сервисный режим (с правильным и неправильным кодом).
    """
    cfg = machine.config
    if machine.state == MachineState.MAINTENANCE:
        r = rng.random()
        if r < 0.4:
            return {"op": "select_product", "args": {"product_id": rng.choice(list(machine.inventory) or [JUNK_PRODUCT])}}
        if r < 0.55:
            return {"op": "dispense", "args": {}}
        if r < 0.65:
            return {"op": "enter_maintenance", "args": {"code": ""}}
        return {"op": "cancel", "args": {}}
    r = rng.random()
    if r < 0.45:
        coins = list(cfg.denominations)
        if rng.random() < 0.1:
            coins = list(JUNK_COINS)
        return {"op": "insert_funds", "args": {"amount": rng.choice(coins)}}
    if r < 0.8:
        ids = list(machine.inventory) + [JUNK_PRODUCT]
        return {"op": "select_product", "args": {"product_id": rng.choice(ids)}}
    if r < 0.9:
        return {"op": "cancel", "args": {}}
    if r < 0.95:
        return {"op": "dispense", "args": {}}
    code = cfg.maintenance_code if rng.random() < 0.5 else "wrong"
    return {"op": "enter_maintenance", "args": {"code": code}}


def generate_sessions(
    n_sessions: int,
    config: Optional[MachineConfig] = None,
    base_seed: Optional[int] = None,
    max_steps: int = 200,
    capture_state_snapshots: bool = False,
) -> Iterator[Tuple[VendingMachine, SessionMetrics, List[StepRecord]]]:
    """Yields (machine, metrics, trace) для n_sessions независимых автоматов."""
    for i in range(n_sessions):
        seed = (base_seed + i * 1000) if base_seed is not None else None
        rng = random.Random(seed)

        def _policy(m: VendingMachine) -> Optional[Dict[str, Any]]:
            return random_policy(m, rng)

        yield run_session(
            _policy,
            config=config,
            max_steps=max_steps,
            capture_state_snapshots=capture_state_snapshots,
        )


def _metrics_dict(metrics: SessionMetrics) -> Dict[str, Any]:
    return {
        "units_sold": metrics.units_sold,
        "revenue": metrics.revenue,
        "change_dispensed": metrics.change_dispensed,
        "change_shortfall": metrics.change_shortfall,
        "short_change_sales": metrics.short_change_sales,
        "refunds": metrics.refunds,
        "final_state": metrics.final_state,
    }


def export_sessions_to_jsonl(
    output_path: str | Path,
    n_sessions: int = 10,
    config: Optional[MachineConfig] = None,
    base_seed: int = 42,
    max_steps: int = 200,
    format: str = "trajectory",
) -> int:
    """
    Генерирует сессии и сохраняет в JSONL. Возвращает число записанных строк.
    """
    if format not in ("trajectory", "steps"):
        raise ValueError(f"Unknown export format: {format}")
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(output_path, "w", encoding="utf-8") as f:
        sessions = generate_sessions(
            n_sessions,
            config=config,
            base_seed=base_seed,
            max_steps=max_steps,
            capture_state_snapshots=(format == "steps"),
        )
        for i, (_, metrics, trace) in enumerate(sessions):
            if format == "trajectory":
                record = {
                    "session": i,
                    "trace": [
                        {"step": r.step, "op": r.op, "args": r.args, "accepted": r.accepted,
                         "message": r.message, "state": r.state, "balance": r.balance}
                        for r in trace
                    ],
                    "metrics": _metrics_dict(metrics),
                }
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
                count += 1
            else:
                for r in trace:
                    f.write(json.dumps({
                        "session": i,
                        "step": r.step,
                        "action": {"op": r.op, "args": r.args},
                        "accepted": r.accepted,
                        "refund": r.refund,
                        "obs": r.state_snapshot,
                    }, ensure_ascii=False) + "\n")
                    count += 1
    return count
