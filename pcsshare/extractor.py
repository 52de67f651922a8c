"""
从分享页面 HTML 中提取分享数据。

分享页面在 <body> 的某个 <script> 中以 yunData.setData({...}) 的形式内嵌页面初始化数据，
其中包含分享者 uk、shareid 与文件的 fs_id。
"""

from __future__ import annotations

import re

from lxml import etree
from lxml.html import fromstring

from pcsshare.models import ShareFileInfo

# 标记内嵌初始化数据的脚本
YUNDATA_MARKER = re.compile(r"yunData\.setData\(\{")

_UK_PATTERN = re.compile(r'"uk":([0-9]+),')
_SHAREID_PATTERN = re.compile(r'"shareid":([0-9]+),')
_FS_ID_PATTERN = re.compile(r'"fs_id":([0-9]+),')


def find_share_script(html: str | bytes) -> str | None:
    """
    按文档顺序扫描 <body> 下的 <script>，返回最后一个包含 yunData.setData({ 的脚本文本。

    页面中若有多个匹配的脚本块，后出现的覆盖先出现的。没有匹配时返回 None。
    """
    try:
        doc = fromstring(html)
    except (etree.ParserError, ValueError):
        return None
    content = None
    for script in doc.xpath("//body//script"):
        text = script.text_content()
        if YUNDATA_MARKER.search(text):
            content = text
    return content


def dedupe(values: list[int]) -> list[int]:
    return list(dict.fromkeys(values))


def parse_share_script(content: str, file_info: ShareFileInfo) -> ShareFileInfo:
    """
    从脚本文本中提取 uk、shareid 和全部 fs_id，写入 file_info 并返回。

    各字段独立匹配；未出现的字段保持原值（默认 0 / 空列表）。
    捕获组只含 ASCII 数字，int() 不会失败。
    """
    m = _UK_PATTERN.search(content)
    if m:
        file_info.share_uk = int(m.group(1))
    m = _SHAREID_PATTERN.search(content)
    if m:
        file_info.share_id = int(m.group(1))
    fs_ids = [int(v) for v in _FS_ID_PATTERN.findall(content)]
    if fs_ids:
        file_info.fs_ids = dedupe(fs_ids)
    return file_info


def extract_share_file_info(html: str | bytes, source_id: str) -> tuple[ShareFileInfo, bool]:
    """
    解析分享页面，返回 (ShareFileInfo, 是否找到页面数据)。

    未找到时 ShareFileInfo 只填了 source_id。
    """
    file_info = ShareFileInfo(source_id=source_id)
    content = find_share_script(html)
    if content is None:
        return file_info, False
    return parse_share_script(content, file_info), True
