"""Domain layer — date keys, schedule rules, streaks, heatmaps.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
