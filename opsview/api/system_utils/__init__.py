from opsview.api.system_utils.request_metrics import track_request_metrics

__all__ = [
    "track_request_metrics",
]
