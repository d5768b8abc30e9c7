"""Domain layer — assets, error codes, arithmetic, and fee rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
