"""
CLI 登录信息：把百度网盘登录 cookie（BDUSS、STOKEN）保存在本地 JSON 文件中。

文件格式：{"cookies": {"BDUSS": "...", "STOKEN": "..."}}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

# 需要保存的登录 cookie；其它 cookie 丢弃
LOGIN_COOKIES = ("BDUSS", "STOKEN")


def _config_dir() -> Path:
    return Path.home() / ".config" / "pcsshare"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def parse_cookie_string(cookie: str) -> dict[str, str]:
    """
    解析从浏览器复制的 Cookie 请求头，如 "BAIDUID=x; BDUSS=y; STOKEN=z"，只保留登录 cookie。
    """
    cookies: dict[str, str] = {}
    for part in cookie.split(";"):
        name, sep, value = part.strip().partition("=")
        if sep and name in LOGIN_COOKIES and value.strip():
            cookies[name] = value.strip()
    return cookies


def load_cookies() -> dict[str, str] | None:
    """读取已保存的登录 cookie；文件不存在、格式不对或没有 BDUSS 时返回 None。"""
    p = _config_path()
    if not p.is_file():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    cookies = data.get("cookies") if isinstance(data, dict) else None
    if not isinstance(cookies, dict):
        return None
    cookies = {k: v for k, v in cookies.items() if k in LOGIN_COOKIES and isinstance(v, str) and v}
    if "BDUSS" not in cookies:
        return None
    return cookies


def save_cookies(cookies: Mapping[str, str | None]) -> dict[str, str]:
    """保存登录 cookie 并返回实际写入的内容；缺少 BDUSS 时抛出 ValueError。"""
    kept = {k: v.strip() for k, v in cookies.items() if k in LOGIN_COOKIES and v and v.strip()}
    if "BDUSS" not in kept:
        raise ValueError("BDUSS is required")
    p = _config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps({"cookies": kept}, ensure_ascii=False, indent=2), encoding="utf-8")
    return kept


def clear_config() -> bool:
    """删除本地登录信息；文件存在时返回 True。"""
    p = _config_path()
    if p.exists():
        p.unlink()
        return True
    return False
