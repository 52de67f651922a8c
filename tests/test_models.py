"""
数据模型单元测试：提取码清理、列表解码、分享链接解析。
"""

from __future__ import annotations

import pytest

from pcsshare.models import (
    ShareRecordInfo,
    ShareRecordInfoList,
    Shared,
    extract_source_id,
    share_page_url,
)

from tests.config import SHARE_INIT_URL, SHARE_PWD, SHARE_SOURCE_ID, SHARE_URL, SHARE_URL_WITH_PWD


@pytest.mark.parametrize("passwd, expected", [("0", ""), ("", ""), ("abcd", "abcd"), ("00", "00")])
def test_record_clean_normalizes_zero_password(passwd: str, expected: str) -> None:
    """clean() 只把 "0" 清理为空，其它值保持不变。"""
    record = ShareRecordInfo(passwd=passwd)
    record.clean()
    assert record.passwd == expected


@pytest.mark.parametrize("passwd, expected", [("", False), ("0", False), ("abcd", True), ("00", True)])
def test_record_has_passwd(passwd: str, expected: bool) -> None:
    """has_passwd() 对 "" 和 "0" 为 False。"""
    assert ShareRecordInfo(passwd=passwd).has_passwd() is expected


def test_record_list_clean_skips_none() -> None:
    """列表 clean() 跳过 None 元素。"""
    records = ShareRecordInfoList([ShareRecordInfo(passwd="0"), None, ShareRecordInfo(passwd="x1y2")])
    records.clean()
    assert records[0].passwd == ""
    assert records[1] is None
    assert records[2].passwd == "x1y2"


def test_record_from_json_maps_camel_case_fields() -> None:
    """share/record 的字段名映射到 ShareRecordInfo。"""
    record = ShareRecordInfo.from_json(
        {
            "shareId": 12,
            "fsIds": [1, 2],
            "passwd": "0",
            "shortlink": "https://pan.baidu.com/s/1abc",
            "status": 0,
            "typicalCategory": 6,
            "typicalPath": "/apps/a.txt",
        }
    )
    assert record.share_id == 12
    assert record.fs_ids == [1, 2]
    assert record.passwd == "0"
    assert record.typical_category == 6
    assert record.typical_path == "/apps/a.txt"


def test_shared_from_json() -> None:
    shared = Shared.from_json({"errno": 0, "link": "https://pan.baidu.com/s/1abc", "shareid": 99})
    assert shared == Shared(link="https://pan.baidu.com/s/1abc", share_id=99)
    assert Shared.from_json({"errno": 0}).link == ""


def test_extract_source_id_from_urls() -> None:
    """支持 /s/1xxx、?pwd=、share/init?surl= 与纯短码。"""
    assert extract_source_id(SHARE_URL) == (SHARE_SOURCE_ID, "")
    assert extract_source_id(SHARE_URL_WITH_PWD) == (SHARE_SOURCE_ID, SHARE_PWD)
    assert extract_source_id(SHARE_INIT_URL) == (SHARE_SOURCE_ID, "")
    assert extract_source_id(SHARE_SOURCE_ID) == (SHARE_SOURCE_ID, "")
    assert share_page_url(SHARE_SOURCE_ID) == SHARE_URL


@pytest.mark.parametrize(
    "url",
    [
        "ftp://pan.baidu.com/s/1abc",
        "https://example.com/s/1abc",
        "https://pan.baidu.com/disk/home",
        "https://pan.baidu.com/share/init",
    ],
)
def test_extract_source_id_rejects_invalid_urls(url: str) -> None:
    with pytest.raises(ValueError):
        extract_source_id(url)
