"""Infrastructure layer — reading habit snapshots from disk.

This layer depends on stdlib and third-party libs (ruamel.yaml).
It may build domain models but must never import from services,
commands, or output.
"""
