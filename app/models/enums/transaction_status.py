from enum import Enum


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
