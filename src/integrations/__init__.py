"""
Integrations with external services (mail transport).
"""
