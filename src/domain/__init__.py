"""
Domain layer for registration processing business logic.

This layer contains:
- Data models (type-safe structures)
- Request gate (validation and honeypot filter)
- Message composer (plain-text notification)
- Business logic (registration pipeline and response mapping)
"""
