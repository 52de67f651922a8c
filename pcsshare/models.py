"""
分享相关的数据模型（与百度网盘 share/pset、share/record 等接口的 JSON 字段对应）。

- ShareRecordInfo.passwd 为 "0" 表示无提取码，解码后经 clean() 统一为空字符串。
- ShareFileInfo 由分享页面中的 yunData.setData({...}) 脚本解析得到，供转存使用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlparse

SHARE_HOST = "pan.baidu.com"


@dataclass
class ShareOption:
    """分享可选项"""

    password: str = ""  # 提取码，空表示公开分享
    period: int = 0  # 有效期（天），0 表示永久


@dataclass
class Shared:
    """创建分享的结果"""

    link: str = ""
    share_id: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Shared:
        return cls(link=data.get("link") or "", share_id=int(data.get("shareid") or 0))


@dataclass
class ShareRecordInfo:
    """分享记录"""

    share_id: int = 0
    fs_ids: list[int] = field(default_factory=list)
    passwd: str = ""
    shortlink: str = ""
    status: int = 0  # 状态
    typical_category: int = 0  # 文件类型
    typical_path: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ShareRecordInfo:
        return cls(
            share_id=int(data.get("shareId") or 0),
            fs_ids=[int(x) for x in data.get("fsIds") or []],
            passwd=str(data.get("passwd") or ""),
            shortlink=data.get("shortlink") or "",
            status=int(data.get("status") or 0),
            typical_category=int(data.get("typicalCategory") or 0),
            typical_path=data.get("typicalPath") or "",
        )

    def clean(self) -> None:
        if self.passwd == "0":
            self.passwd = ""

    def has_passwd(self) -> bool:
        """是否需要提取码"""
        return self.passwd not in ("", "0")


class ShareRecordInfoList(list):
    """分享记录列表，元素可以为 None（clean 时跳过）。"""

    @classmethod
    def from_json(cls, items: list[dict[str, Any] | None]) -> ShareRecordInfoList:
        return cls(ShareRecordInfo.from_json(item) if item is not None else None for item in items)

    def clean(self) -> None:
        for record in self:
            if record is None:
                continue
            record.clean()


@dataclass
class ShareFileInfo:
    """分享文件信息（从分享页面解析）"""

    source_id: str = ""
    share_id: int = 0
    fs_ids: list[int] = field(default_factory=list)
    share_uk: int = 0  # 分享者的用户 id


def share_page_url(source_id: str) -> str:
    """分享页面地址，形如 https://pan.baidu.com/s/1xxxx"""
    return f"https://{SHARE_HOST}/s/1{source_id}"


def extract_source_id(url: str) -> tuple[str, str]:
    """
    从分享链接中提取 (source_id, 提取码)。

    支持：
    - https://pan.baidu.com/s/1AbCdEf?pwd=abcd
    - https://pan.baidu.com/share/init?surl=AbCdEf
    - 直接给出短码 AbCdEf
    """
    raw = (url or "").strip()
    parsed = urlparse(raw)
    if not parsed.scheme:
        return raw.removeprefix("/s/1"), ""
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"url 协议只接受 'http' 和 'https'，收到 {parsed.scheme!r}")
    if parsed.netloc and parsed.netloc != SHARE_HOST:
        raise ValueError(f"url 的域名必须是 {SHARE_HOST!r}，收到 {parsed.netloc!r}")
    query = dict(parse_qsl(parsed.query))
    path = parsed.path
    if path == "/share/init":
        source_id = query.get("surl", "")
    elif path.startswith("/s/1"):
        source_id = path.removeprefix("/s/1").strip("/")
    else:
        raise ValueError(f"invalid share url: {url!r}")
    if not source_id:
        raise ValueError(f"invalid share url: {url!r}")
    return source_id, query.get("pwd", "")
