#!/usr/bin/env python3
"""
CLI: прогон демонстрационных сценариев: покупка, нехватка денег, отмена, сервисный режим.
"""
import argparse
import sys
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def main():
    parser = argparse.ArgumentParser(description="Run the vending machine walkthrough")
    parser.add_argument("--member", action="store_true", help="Price sales with member discounts")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--log-file", type=str, default=None)
    args = parser.parse_args()

    from vending_machine.logging_config import setup_logging
    from vending_machine.core.machine import VendingMachine
    from vending_machine.eval.runner import run_session
    from vending_machine.eval.snapshots import machine_snapshot

    logger = setup_logging(verbose=args.verbose, log_file=args.log_file)
    machine = VendingMachine(is_member=args.member)

    scenarios = [
        ("Normal purchase", [
            {"op": "insert_funds", "args": {"amount": 10}},
            {"op": "insert_funds", "args": {"amount": 10}},
            {"op": "insert_funds", "args": {"amount": 10}},
            {"op": "select_product", "args": {"product_id": "A1"}},
        ]),
        ("Insufficient funds", [
            {"op": "insert_funds", "args": {"amount": 5}},
            {"op": "select_product", "args": {"product_id": "A1"}},
        ]),
        ("Cancel", [
            {"op": "cancel", "args": {}},
        ]),
        ("Maintenance", [
            {"op": "enter_maintenance", "args": {"code": "admin123"}},
            {"op": "select_product", "args": {"product_id": "A1"}},
            {"op": "cancel", "args": {}},
        ]),
    ]
    for title, actions in scenarios:
        logger.info("--- %s ---", title)
        _, _, trace = run_session(actions, machine=machine)
        for rec in trace:
            print(f"{rec.op}({rec.args}) -> {rec.message} [{rec.state}, balance {rec.balance}]")

    snap = machine_snapshot(machine)
    print(f"Final: state={snap['state']} balance={snap['balance']} reserve={snap['reserve']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
