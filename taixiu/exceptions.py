# Lỗi của dịch vụ. Chỉ SourceError (và lớp con) đi tới tầng HTTP;
# PersistenceError do tầng db raise, HistoryStore tự nuốt và log.
from __future__ import annotations


class TaiXiuError(Exception):
    pass


class SourceError(TaiXiuError):
    """Nguồn phiên không trả về được danh sách dùng được."""


class SourceUnavailable(SourceError):
    # timeout=True khi hết thời gian chờ, False khi lỗi kết nối/HTTP
    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class MalformedSourcePayload(SourceError):
    """Nguồn có trả lời nhưng thiếu ``list`` hợp lệ hoặc trường sai kiểu."""


class PersistenceError(TaiXiuError):
    pass


class PersistenceReadFailure(PersistenceError):
    pass


class PersistenceWriteFailure(PersistenceError):
    pass


class EnsembleError(TaiXiuError):
    """Số phần tử vector ước lượng khác số trọng số."""
