"""百度网盘分享链接管理 Python 客户端：创建/取消/列出分享、验证提取码、解析与转存分享。"""

from pcsshare.client import PCSClient
from pcsshare.errors import ErrorType, PanError, ShareLinkNotFoundError
from pcsshare.models import (
    ShareFileInfo,
    ShareOption,
    ShareRecordInfo,
    ShareRecordInfoList,
    Shared,
    extract_source_id,
)

__all__ = [
    "PCSClient",
    "ErrorType",
    "PanError",
    "ShareLinkNotFoundError",
    "ShareFileInfo",
    "ShareOption",
    "ShareRecordInfo",
    "ShareRecordInfoList",
    "Shared",
    "extract_source_id",
]
