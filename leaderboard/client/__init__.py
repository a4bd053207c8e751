from .api import ApiError, LeaderboardClient
from .session import LeaderboardSession, is_new_top
from .view import EditRejected, build_update_payload, export_csv, filter_and_sort, top_summary

__all__ = [
    "ApiError",
    "LeaderboardClient",
    "LeaderboardSession",
    "is_new_top",
    "EditRejected",
    "build_update_payload",
    "export_csv",
    "filter_and_sort",
    "top_summary",
]
