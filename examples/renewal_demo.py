#!/usr/bin/env python3
"""
Renewal Demo - Subscription Renewal Controller

Walks a subscription through the renewal state machine:
- Active -> Retrying on a failed renewal
- Cooldown rejection for an early retry
- Retrying -> Active on success
- Escalation to the absorbing Failed state

Run: python examples/renewal_demo.py
"""

from renewal_app.engine import RenewalEngine
from renewal_app.errors import InvocationAbort

MAX_RETRIES = 2
COOLDOWN = 10


def attempt(engine: RenewalEngine, subscription_id: int, succeeded: bool) -> None:
    """Run one renewal and print the outcome."""
    sequence = engine.sequence.current()
    try:
        result = engine.renew(subscription_id, succeeded, MAX_RETRIES, COOLDOWN)
        record = engine.get_subscription(subscription_id)
        print(f"  seq {sequence:>3}: renew(succeeded={succeeded}) -> {result}, "
              f"state={record.state.value}, failures={record.failure_count}")
    except InvocationAbort as e:
        print(f"  seq {sequence:>3}: renew(succeeded={succeeded}) aborted: {e}")


def main() -> None:
    engine = RenewalEngine(
        overrides={
            "events": {"sink": "stdout", "format": "pretty"},
            "logging": {"level": "WARNING"},
        },
        setup_logging=True
    )

    print("🔄 SUBSCRIPTION RENEWAL DEMO")
    print("=" * 50)

    engine.init_subscription("GOWNER-0001", 456)

    attempt(engine, 456, succeeded=False)
    attempt(engine, 456, succeeded=False)         # inside cooldown

    engine.advance_sequence(COOLDOWN)
    attempt(engine, 456, succeeded=True)

    for _ in range(MAX_RETRIES + 1):
        attempt(engine, 456, succeeded=False)
        engine.advance_sequence(COOLDOWN)

    attempt(engine, 456, succeeded=True)          # Failed is absorbing


if __name__ == "__main__":
    main()
