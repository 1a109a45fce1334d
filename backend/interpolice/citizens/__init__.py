"""
Citizen Registry

Identity registry consulted by the citation and criminal record services.
"""

from .registry import (
    citizen_exists,
    planet_exists,
    status_exists,
    get_citizen,
    list_citizens,
    search_citizens,
    create_citizen,
    update_citizen,
    delete_citizen,
    citizen_statistics,
    list_planets,
    list_statuses,
    to_citizen_response,
)


__all__ = [
    "citizen_exists",
    "planet_exists",
    "status_exists",
    "get_citizen",
    "list_citizens",
    "search_citizens",
    "create_citizen",
    "update_citizen",
    "delete_citizen",
    "citizen_statistics",
    "list_planets",
    "list_statuses",
    "to_citizen_response",
]
