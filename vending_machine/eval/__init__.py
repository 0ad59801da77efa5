from .runner import run_session, apply_action, StepRecord
from .metrics import compute_metrics, SessionMetrics
from .snapshots import machine_snapshot
from .data_generation import (
    random_policy,
    generate_sessions,
    export_sessions_to_jsonl,
)

__all__ = [
    "run_session",
    "apply_action",
    "StepRecord",
    "compute_metrics",
    "SessionMetrics",
    "machine_snapshot",
    "random_policy",
    "generate_sessions",
    "export_sessions_to_jsonl",
]
