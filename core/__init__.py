"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Store, event bus and notification abstractions
- Licensing configuration and metrics
"""
