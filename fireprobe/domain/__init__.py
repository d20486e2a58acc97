"""Domain layer: entities, enums, and exceptions.

No infrastructure or framework imports.
"""
