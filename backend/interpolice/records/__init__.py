"""
Criminal Records

Direct entry and reporting for felony-level records.
"""

from .queries import (
    CriminalRecordEntry,
    count_records,
    get_record,
    list_citizen_records,
    list_records,
    search_records,
    create_record,
    update_record,
    delete_record,
    record_statistics,
    dangerous_locations,
)


__all__ = [
    "CriminalRecordEntry",
    "count_records",
    "get_record",
    "list_citizen_records",
    "list_records",
    "search_records",
    "create_record",
    "update_record",
    "delete_record",
    "record_statistics",
    "dangerous_locations",
]
