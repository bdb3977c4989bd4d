"""Domain layer: ledger models, calendar rules, and the projection engine.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
