from .pool_service import PoolService
from .report_service import ReportService

__all__ = [
    "PoolService",
    "ReportService",
]
