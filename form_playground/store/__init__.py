from form_playground.store.records import RecordFilter, RecordStore

__all__ = ["RecordFilter", "RecordStore"]
