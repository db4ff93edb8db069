"""Core business logic layer.

Subpackages:
- shopping: ingredient categorizing, aggregation and shopping list generation
- reporting: nutrition summaries for meal plans

Nothing here touches storage; recipes are handed in by the caller.
"""
__all__ = ["shopping", "reporting"]
