"""Remote record lookups used to resolve a customer's primary contact."""

from caseintake.records.inmemory import InMemoryRecordService
from caseintake.records.service import RecordService
from caseintake.records.webapi import WebApiRecordService

__all__ = ["RecordService", "InMemoryRecordService", "WebApiRecordService"]
