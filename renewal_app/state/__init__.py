"""
Renewal state machine module.

Holds the persisted subscription record, the pure renewal evaluation and the
controller that applies it: Active -> Retrying -> Failed, with Failed absorbing.
"""
