"""
百度网盘分享 API 客户端。

基于网页版 pan.baidu.com 的 share/* 接口实现：创建分享、验证提取码、解析分享页面、
转存分享文件、取消分享、列出分享记录。认证使用登录后的 BDUSS / STOKEN cookie。
"""

from __future__ import annotations

import json
from http.cookiejar import CookieJar, DefaultCookiePolicy
import logging
from typing import Any, Callable, Iterable
from urllib.parse import unquote

import httpx

from pcsshare.errors import (
    TRANSFER_DEFAULT_ERRNO,
    ErrorType,
    PanError,
    ShareLinkNotFoundError,
    decode_pan_json_error,
    handle_json_parse,
    read_json,
)
from pcsshare.extractor import extract_share_file_info
from pcsshare.models import (
    ShareFileInfo,
    ShareOption,
    ShareRecordInfoList,
    Shared,
    share_page_url,
)

logger = logging.getLogger(__name__)

PAN_URL = "https://pan.baidu.com"
APP_ID = "250528"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)

# 验证提取码成功后服务端下发的会话 cookie
SHARE_SESSION_COOKIE = "BDCLND"

OPERATION_SHARE_SET = "分享文件"
OPERATION_SHARE_VERIFY = "验证分享"
OPERATION_SHARE_PARSE = "解析分享"
OPERATION_SHARE_TRANSFER = "转存分享"
OPERATION_SHARE_CANCEL = "取消分享"
OPERATION_SHARE_LIST = "列出分享列表"


def _cookie_header(cookies: dict[str, str]) -> str:
    return "; ".join(f"{k}={v}" for k, v in cookies.items() if v)


def _response_cookie(response: httpx.Response, name: str) -> str:
    """响应 Set-Cookie 中名为 name 的值；出现多次时取最后一个。"""
    value = ""
    for cookie in response.cookies.jar:
        if cookie.name == name:
            value = cookie.value or ""
    return value


class PCSClient:
    """
    百度网盘分享客户端。

    cookie 不依赖 httpx 客户端的共享 cookie 罐：每个请求显式携带登录 cookie，
    转存所需的分享会话 cookie（BDCLND）由调用链作为参数传递。
    """

    def __init__(
        self,
        bduss: str | None = None,
        stoken: str | None = None,
        *,
        bdstoken: str | None = None,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        :param bduss: 登录 cookie BDUSS
        :param stoken: 登录 cookie STOKEN（转存需要）
        :param bdstoken: 已知的 bdstoken；不传则首次需要时请求 gettemplatevariable 获取
        :param timeout: 请求超时秒数
        :param verify: 是否验证 HTTPS 证书
        :param transport: 自定义 httpx transport（测试时可传 httpx.MockTransport）
        """
        self.cookies: dict[str, str] = {}
        if bduss:
            self.cookies["BDUSS"] = bduss
        if stoken:
            self.cookies["STOKEN"] = stoken
        self.timeout = timeout
        self.verify = verify
        self._transport = transport
        self._bdstoken = bdstoken
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=PAN_URL,
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
                verify=self.verify,
                follow_redirects=True,
                # 拒绝保存任何响应 cookie，会话 cookie 只通过参数传递
                cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
                transport=self._transport,
            )
        return self._client

    def _headers(self, session_cookies: dict[str, str] | None = None, referer: str | None = None) -> dict[str, str]:
        cookies = {**self.cookies, **(session_cookies or {})}
        headers = {"Referer": referer or f"{PAN_URL}/disk/home"}
        if cookies:
            headers["Cookie"] = _cookie_header(cookies)
        return headers

    def _params(self, *, with_bdstoken: bool = False, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"channel": "chunlei", "clienttype": 0, "web": 1, "app_id": APP_ID}
        if with_bdstoken:
            params["bdstoken"] = self.get_bdstoken()
        params.update(extra)
        return params

    def close(self) -> None:
        """关闭底层 HTTP 客户端。"""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> PCSClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get_bdstoken(self) -> str:
        """获取 bdstoken（写操作需要）；结果缓存在客户端上。"""
        if self._bdstoken is None:
            r = self._get_client().get(
                "/api/gettemplatevariable",
                params={"fields": json.dumps(["bdstoken"])},
                headers=self._headers(),
            )
            r.raise_for_status()
            data = handle_json_parse("获取 bdstoken", r)
            bdstoken = str((data.get("result") or {}).get("bdstoken") or "")
            if not bdstoken:
                raise PanError("获取 bdstoken", ErrorType.OTHERS, "bdstoken is empty")
            self._bdstoken = bdstoken
        return self._bdstoken

    # ------------------------- 请求构造 -------------------------

    def prepare_share_pset(self, paths: Iterable[str], period: int = 0, password: str = "") -> httpx.Response:
        """
        POST /share/pset 创建分享。

        :param paths: 网盘内的绝对路径
        :param period: 有效期（天），0 为永久
        :param password: 提取码，为空则公开分享
        """
        data: dict[str, Any] = {
            "path_list": json.dumps(list(paths), ensure_ascii=False),
            "schannel": 4 if password else 0,
            "channel_list": "[]",
            "period": period,
        }
        if password:
            data["pwd"] = password
        logger.debug("share pset: %s", data["path_list"])
        r = self._get_client().post(
            "/share/pset",
            params=self._params(with_bdstoken=True),
            data=data,
            headers=self._headers(),
        )
        r.raise_for_status()
        return r

    def prepare_share_verify(self, source_id: str, password: str) -> httpx.Response:
        """POST /share/verify 验证提取码；成功时响应会下发 BDCLND cookie。"""
        logger.debug("share verify: %s", source_id)
        r = self._get_client().post(
            "/share/verify",
            params=self._params(surl=source_id),
            data={"pwd": password, "vcode": "", "vcode_str": ""},
            headers=self._headers(referer=share_page_url(source_id)),
        )
        r.raise_for_status()
        return r

    def prepare_share_parse(self, source_id: str, password: str) -> tuple[httpx.Response, dict[str, str]]:
        """
        获取分享页面。有提取码时先验证，再带上会话 cookie 请求页面。

        :return: (页面响应, 本次会话得到的 cookie)，后者供 prepare_share_transfer 使用
        """
        session_cookies: dict[str, str] = {}
        if password:
            token = _response_cookie(self.prepare_share_verify(source_id, password), SHARE_SESSION_COOKIE)
            if token:
                session_cookies[SHARE_SESSION_COOKIE] = token
            else:
                logger.warning("share %s: verify returned no %s cookie", source_id, SHARE_SESSION_COOKIE)
        url = share_page_url(source_id)
        logger.debug("share page: %s", url)
        r = self._get_client().get(url, headers=self._headers(session_cookies, referer=url))
        r.raise_for_status()
        for cookie in r.cookies.jar:
            if cookie.value:
                session_cookies[cookie.name] = cookie.value
        return r, session_cookies

    def prepare_share_transfer(
        self,
        file_info: ShareFileInfo,
        dest_path: str,
        session_cookies: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        POST /share/transfer 将分享文件转存到自己网盘的 dest_path。

        :param session_cookies: 分享页面会话 cookie（含 BDCLND 时同时作为 sekey）
        """
        session_cookies = session_cookies or {}
        params = self._params(
            with_bdstoken=True,
            shareid=file_info.share_id,
            ondup="newcopy",
            **{"from": file_info.share_uk, "async": 1},
        )
        if session_cookies.get(SHARE_SESSION_COOKIE):
            params["sekey"] = unquote(session_cookies[SHARE_SESSION_COOKIE])
        data = {
            "fsidlist": json.dumps(file_info.fs_ids),
            "path": dest_path,
        }
        logger.debug("share transfer: %s -> %s", file_info.source_id, dest_path)
        r = self._get_client().post(
            "/share/transfer",
            params=params,
            data=data,
            headers=self._headers(session_cookies, referer=share_page_url(file_info.source_id)),
        )
        r.raise_for_status()
        return r

    def prepare_share_cancel(self, share_ids: Iterable[int]) -> httpx.Response:
        """POST /share/cancel 取消分享。"""
        r = self._get_client().post(
            "/share/cancel",
            params=self._params(with_bdstoken=True),
            data={"shareid_list": json.dumps(list(share_ids))},
            headers=self._headers(),
        )
        r.raise_for_status()
        return r

    def prepare_share_list(self, page: int) -> httpx.Response:
        """GET /share/record 分享记录，page 从 1 开始。"""
        r = self._get_client().get(
            "/share/record",
            params=self._params(page=page, desc=1, order="time"),
            headers=self._headers(),
        )
        r.raise_for_status()
        return r

    # ------------------------- 分享操作 -------------------------

    @staticmethod
    def _send(operation: str, prepare: Callable[..., Any], *args: Any, errno: int = 0) -> Any:
        try:
            return prepare(*args)
        except httpx.HTTPError as e:
            logger.warning("%s: %s", operation, e)
            raise PanError(operation, ErrorType.NET_ERROR, e, errno=errno) from e

    def _fetch_share_file_info(
        self, operation: str, source_id: str, pwd: str, *, errno: int = 0
    ) -> tuple[ShareFileInfo, dict[str, str]]:
        r, session_cookies = self._send(operation, self.prepare_share_parse, source_id, pwd, errno=errno)
        file_info, found = extract_share_file_info(r.content, source_id)
        if not found:
            logger.warning("%s: no share data found in page of %s", operation, source_id)
            raise ShareLinkNotFoundError(operation, errno=errno, file_info=file_info)
        return file_info, session_cookies

    def share_set(self, paths: list[str], option: ShareOption | None = None) -> Shared:
        """
        分享文件，返回分享链接与 shareid。

        接口返回成功但 link 为空时同样视为失败（ShareLinkNotFoundError）。
        """
        if option is None:
            option = ShareOption()
        r = self._send(OPERATION_SHARE_SET, self.prepare_share_pset, paths, option.period, option.password)
        shared = Shared.from_json(handle_json_parse(OPERATION_SHARE_SET, r))
        if not shared.link:
            logger.warning("%s: empty link in response", OPERATION_SHARE_SET)
            raise ShareLinkNotFoundError(OPERATION_SHARE_SET)
        return shared

    def verify_share_token(self, source_id: str, pwd: str) -> str:
        """验证提取码，返回会话 cookie BDCLND 的值；未下发时抛出 ShareLinkNotFoundError。"""
        r = self._send(OPERATION_SHARE_VERIFY, self.prepare_share_verify, source_id, pwd)
        token = _response_cookie(r, SHARE_SESSION_COOKIE)
        if not token:
            raise ShareLinkNotFoundError(OPERATION_SHARE_VERIFY)
        return token

    def share_verify(self, source_id: str, pwd: str) -> bool:
        """验证提取码。只以响应是否下发非空的 BDCLND cookie 为准，不看响应体。"""
        self.verify_share_token(source_id, pwd)
        return True

    share_info = share_verify

    def share_parse(self, source_id: str, pwd: str) -> ShareFileInfo:
        """
        解析分享页面，得到分享者 uk、shareid 与文件 fs_id 列表。

        页面中找不到 yunData.setData 数据时抛出 ShareLinkNotFoundError，
        异常的 file_info 属性为已解析的部分结果。
        """
        file_info, _ = self._fetch_share_file_info(OPERATION_SHARE_PARSE, source_id, pwd)
        return file_info

    def share_transfer(self, source_id: str, pwd: str, path: str) -> int:
        """
        转存分享文件到自己网盘的 path，返回接口的 errno（0 为成功）。

        每次都会重新获取并解析分享页面。解析阶段失败时抛出 errno 为 1000 的 PanError；
        转存接口返回的 errno 不作为异常，原样返回。
        """
        file_info, session_cookies = self._fetch_share_file_info(
            OPERATION_SHARE_TRANSFER, source_id, pwd, errno=TRANSFER_DEFAULT_ERRNO
        )
        r = self._send(OPERATION_SHARE_TRANSFER, self.prepare_share_transfer, file_info, path, session_cookies)
        data = read_json(OPERATION_SHARE_TRANSFER, r)
        errno = data.get("errno")
        errno = TRANSFER_DEFAULT_ERRNO if errno is None else int(errno)
        if errno:
            logger.info("%s: %s -> %s errno=%d", OPERATION_SHARE_TRANSFER, source_id, path, errno)
        return errno

    def share_cancel(self, share_ids: list[int]) -> None:
        """取消分享；响应信封无错误即成功。"""
        r = self._send(OPERATION_SHARE_CANCEL, self.prepare_share_cancel, share_ids)
        decode_pan_json_error(OPERATION_SHARE_CANCEL, r)

    def share_list(self, page: int = 1) -> ShareRecordInfoList:
        """
        列出分享记录（page 从 1 开始）。

        响应中 list 为 null 视为错误；空列表为正常结果。返回前会把提取码 "0" 清理为空。
        """
        r = self._send(OPERATION_SHARE_LIST, self.prepare_share_list, page)
        data = handle_json_parse(OPERATION_SHARE_LIST, r)
        items = data.get("list")
        if items is None:
            raise PanError(OPERATION_SHARE_LIST, ErrorType.OTHERS, "shared list is nil")
        records = ShareRecordInfoList.from_json(items)
        records.clean()
        return records
