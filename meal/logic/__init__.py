"""Core business logic layer.

Subpackages:
- shopping: ingredient normalization and shopping list aggregation
- selection: the set of meals chosen for the shopping list
- persistence: when the meal list is mirrored to storage
- planner: the service that owns meals, selection and settings
"""
__all__ = ["shopping", "selection", "persistence", "planner"]
