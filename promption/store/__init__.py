from promption.store.repository import RecordStore

__all__ = ["RecordStore"]
