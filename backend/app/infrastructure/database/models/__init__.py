from .record import RecordKeyModel, RecordModel

__all__ = [
    "RecordModel",
    "RecordKeyModel",
]
