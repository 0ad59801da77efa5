#!/usr/bin/env python3
"""
Генерация случайных сессий покупателей и экспорт в JSONL.
Примеры:
  python scripts/generate_sessions.py --out data/sessions.jsonl --n 20
  python scripts/generate_sessions.py --out data/steps.jsonl --n 5 --format steps --max-steps 100
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vending_machine.eval.data_generation import export_sessions_to_jsonl
from vending_machine.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Generate random vending machine sessions")
    parser.add_argument("--out", type=str, default="data/sessions.jsonl", help="Output JSONL path")
    parser.add_argument("--n", type=int, default=10, help="Number of sessions")
    parser.add_argument("--format", type=str, default="trajectory", choices=["trajectory", "steps"])
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-steps", type=int, default=200)
    parser.add_argument("--quiet", "-q", action="store_true")
    args = parser.parse_args()

    setup_logging(quiet=args.quiet)
    count = export_sessions_to_jsonl(
        output_path=args.out,
        n_sessions=args.n,
        base_seed=args.seed,
        max_steps=args.max_steps,
        format=args.format,
    )
    print(f"Wrote {count} records to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
