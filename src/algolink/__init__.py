"""algolink - wallet-linked Algorand transaction lifecycle engine.

Builds, groups, signs (through an external wallet session), submits and
tracks donation payments, asset opt-ins and two-party atomic swaps.
"""

__version__ = "0.1.0"
