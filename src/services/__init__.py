"""
Utility functions for Lambda handler operations.

This package contains reusable helpers for reading API Gateway proxy events
and building proxy responses.
"""

__all__ = ['http']
