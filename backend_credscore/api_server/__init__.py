"""
API server package: HTTP interface over the scoring engine.

Collects the user's sources, evaluates them and stores the result; also serves
stored totals, registers vault auth tokens and manages linked wallets.
"""
