from .directory import DEFAULT_RECORDS, Directory
from .records import QueryFn, LookupRecord

__all__ = ["DEFAULT_RECORDS", "Directory", "LookupRecord", "QueryFn"]
