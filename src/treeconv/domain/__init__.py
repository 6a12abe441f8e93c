"""Domain layer — value trees, conversion errors, and robotics aggregates.

This layer depends only on stdlib and pydantic.
It must never import from conversion, services, infrastructure, or commands.
"""
