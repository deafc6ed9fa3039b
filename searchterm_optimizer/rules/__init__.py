"""
Classification rules: negative_rules, bid_rules, pending_rules. Each module
exports its registry list; the engine concatenates them in priority order.
"""
