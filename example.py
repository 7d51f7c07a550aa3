#!/usr/bin/env python3
"""
Pool Ledger Walkthrough
Runs a deposit / profit / withdrawal cycle against an in-memory pool and
prints the ledger after each step.

Usage:
    python example.py [--deposit=1000] [--profit=100] [--commission=10]

Example:
    python example.py --deposit=5000 --profit=-250
"""

import argparse
import logging

from tabulate import tabulate

from pool_ledger.config import Config, DAY
from pool_ledger.custody import InMemoryCustody
from pool_ledger.engine import PoolEngine
from pool_ledger.errors import PoolLedgerError

START = 1_760_000_000


def print_ledger(engine: PoolEngine, title: str) -> None:
    """Print balances and totals as a table."""
    rows = [
        [participant, engine.balance_of(participant)]
        for participant in sorted(engine.state.accounts.known_participants())
    ]
    print(f"\n== {title}")
    print(tabulate(rows, headers=["Participant", "Balance"], tablefmt="simple"))
    print(
        f"Total deposits: {engine.total_deposits()}  "
        f"Rounding drift: {engine.rounding_drift()}  "
        f"Custody: {engine.custody_balance()}"
    )


def main():
    parser = argparse.ArgumentParser(description="Walk through a pool ledger cycle")
    parser.add_argument("--deposit", type=int, default=1000, help="Amount deposited by each participant")
    parser.add_argument("--profit", type=int, default=100, help="Signed profit to distribute")
    parser.add_argument("--commission", type=int, default=10, help="Commission rate in percent")
    parser.add_argument("--verbose", action="store_true", help="Show engine log output")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = Config(
        min_deposit=100,
        max_deposit=max(10_000, args.deposit),
        commission_rate=args.commission,
        withdrawal_freeze_period=7 * DAY,
        withdrawal_cooldown=DAY,
    )
    custody = InMemoryCustody()
    engine = PoolEngine(config, custody=custody, clock=lambda: START)

    for participant in ("alice", "bob"):
        engine.deposit(participant, args.deposit)
    print_ledger(engine, "After deposits")

    if args.profit > 0:
        # Realized trading profit arrives in custody before it is reported
        custody.fund(args.profit)
    event = engine.distribute_profit(config.investor, args.profit, now=START + DAY)
    print_ledger(
        engine,
        f"After distributing {event.signedProfit} "
        f"(commission {event.commission}, creator tax {event.creatorTax})",
    )

    half = engine.balance_of("alice") // 2
    requested = engine.request_withdrawal("alice", half, now=START + DAY)
    print(f"\nalice requested {half}, unlocks at {requested.unlockTime}")

    try:
        engine.withdraw_share("alice", 0, now=START + 2 * DAY)
    except PoolLedgerError as e:
        print(f"Early release rejected: {type(e).__name__}: {e}")

    engine.withdraw_share("alice", 0, now=requested.unlockTime)
    print_ledger(engine, "After alice's withdrawal")

    rate = engine.annual_return_rate(now=START + 30 * DAY)
    print(f"\nAnnualized return after 30 days: {rate}%")


if __name__ == "__main__":
    main()
