"""Trip cost allocation and reconciliation engine.

Splits flight, lodging and tour costs across the members who paid for them
and builds a combined per-member cost report for a group trip.
"""

__version__ = "0.1.0"
