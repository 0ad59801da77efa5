"""
Прогон сессии: политика (или готовый список действий) вызывает операции автомата шаг за шагом.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from vending_machine.config import MachineConfig
from vending_machine.core.machine import VendingMachine
from .metrics import SessionMetrics, compute_metrics
from .snapshots import machine_snapshot

OPERATIONS = ("insert_funds", "select_product", "dispense", "cancel", "enter_maintenance")

Action = Dict[str, Any]
Policy = Callable[[VendingMachine], Optional[Action]]


@dataclass
class StepRecord:
    """Один шаг трассы."""
    step: int
    op: str
    args: Dict[str, Any]
    accepted: bool
    message: str
    refund: int
    state: str
    balance: int
    state_snapshot: Optional[Dict[str, Any]] = None


def apply_action(machine: VendingMachine, op: str, args: Dict[str, Any]) -> tuple[bool, str, int]:
    """Выполнить одну операцию. Returns: (accepted, message, refund)."""
    if op == "insert_funds":
        r = machine.insert_funds(int(args.get("amount", 0)))
    elif op == "select_product":
        r = machine.select_product(str(args.get("product_id", "")))
    elif op == "dispense":
        r = machine.dispense()
    elif op == "cancel":
        refund = machine.cancel()
        return True, f"Refunded {refund}.", refund
    elif op == "enter_maintenance":
        r = machine.enter_maintenance(str(args.get("code", "")))
    else:
        return False, f"Unknown operation: {op}", 0
    return r.accepted, r.message, r.refund


def _as_policy(actions: Union[Policy, Iterable[Action]]) -> Policy:
    if callable(actions):
        return actions
    it = iter(actions)

    def _next(_machine: VendingMachine) -> Optional[Action]:
        return next(it, None)
    return _next


def run_session(
    actions: Union[Policy, Iterable[Action]],
    machine: Optional[VendingMachine] = None,
    config: Optional[MachineConfig] = None,
    max_steps: int = 1000,
    capture_state_snapshots: bool = False,
) -> tuple[VendingMachine, SessionMetrics, List[StepRecord]]:
    """
    actions: список {"op": name, "args": {...}} или callable(machine) -> action | None.
    Возвращает (machine, metrics, trace).
    """
    machine = machine or VendingMachine(config)
    policy = _as_policy(actions)
    trace: List[StepRecord] = []
    op_count: Dict[str, int] = {}
    step = 0
    while step < max_steps:
        action = policy(machine)
        if action is None:
            break
        op = action.get("op", "")
        args = action.get("args", {})
        accepted, message, refund = apply_action(machine, op, args)
        op_count[op] = op_count.get(op, 0) + 1
        trace.append(StepRecord(
            step=step,
            op=op,
            args=args,
            accepted=accepted,
            message=message[:200],
            refund=refund,
            state=machine.state.value,
            balance=machine.balance,
            state_snapshot=machine_snapshot(machine) if capture_state_snapshots else None,
        ))
        step += 1
    metrics = compute_metrics(machine, steps=step, op_count=op_count)
    return machine, metrics, trace
