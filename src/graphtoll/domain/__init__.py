"""Domain layer — graph arena, pricing, path search, and moderation rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
