"""
Interpolice - citizen infraction records with automatic citation escalation
"""

__version__ = "1.0.0"
