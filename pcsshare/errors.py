"""
百度网盘接口错误：错误分类、错误信息表与 JSON 响应（errno 信封）解析。
"""

from __future__ import annotations

import enum
from typing import Any

import httpx

# errno 对应的信息（分享相关的常见错误）
ERRNO_TO_MESSAGE: dict[int, str] = {
    0: "成功",
    -1: "由于您分享了违反相关法律法规的文件，分享功能已被禁用，之前分享出去的文件不受影响。",
    -2: "用户不存在,请刷新页面后重试",
    -3: "文件不存在,请刷新页面后重试",
    -4: "登录信息有误，请重新登录试试",
    -6: "请重新登录",
    -7: "该分享已删除或已取消",
    -8: "该分享已经过期",
    -9: "访问密码错误",
    -10: "分享外链已经达到最大上限100000条，不能再次分享",
    -11: "验证cookie无效",
    -12: "参数错误",
    -16: "对不起，该文件已经限制分享！",
    -17: "文件分享超过限制",
    -30: "文件已存在",
    -31: "文件保存失败",
    -32: "你的空间不足了哟",
    -33: "一次支持操作999个，减点试试吧",
    -62: "需要验证码或者验证码错误",
    2: "参数错误",
    3: "未登录或帐号无效",
    4: "存储好像出问题了，请稍候再试",
    105: "啊哦，链接错误没找到文件，请打开正确的分享链接",
    110: "分享次数超出限制，可以到“我的分享”中查看已分享的文件链接",
    111: "当前还有未完成的任务，需完成后才能操作",
    112: "页面已过期，请刷新后重试",
    115: "该文件禁止分享",
    120: "转存文件数超过限制",
    12: "批量处理错误",
}

# 分享转存在解析阶段失败时返回的错误码
TRANSFER_DEFAULT_ERRNO = 1000


class ErrorType(enum.Enum):
    """错误分类。"""

    NET_ERROR = "网络请求错误"
    JSON_PARSE_ERROR = "json 数据解析失败"
    REMOTE_ERROR = "远端服务器返回错误"
    OTHERS = "未知错误"


class PanError(Exception):
    """
    一次操作的错误信息：操作名、错误分类、底层原因、以及服务端的 errno / errmsg。
    """

    def __init__(
        self,
        operation: str,
        err_type: ErrorType = ErrorType.OTHERS,
        cause: BaseException | str | None = None,
        *,
        errno: int = 0,
        errmsg: str = "",
    ):
        self.operation = operation
        self.err_type = err_type
        self.cause = cause
        self.errno = errno
        self.errmsg = errmsg
        super().__init__(str(self))

    def reason(self) -> str:
        if self.err_type is ErrorType.REMOTE_ERROR:
            msg = self.errmsg or ERRNO_TO_MESSAGE.get(self.errno, "未知错误")
            return f"遇到错误, 远端服务器返回错误, 代码: {self.errno}, 消息: {msg}"
        if self.cause is not None:
            return f"{self.err_type.value}, {self.cause}"
        return self.err_type.value

    def __str__(self) -> str:
        return f"{self.operation}: {self.reason()}"


class ShareLinkNotFoundError(PanError):
    """未找到分享链接。结构上合法的响应中缺少链接、会话 cookie 或页面数据时抛出。"""

    MESSAGE = "未找到分享链接"

    def __init__(self, operation: str, *, errno: int = 0, file_info: Any = None):
        self.file_info = file_info
        super().__init__(operation, ErrorType.OTHERS, self.MESSAGE, errno=errno)


def read_json(operation: str, response: httpx.Response) -> dict[str, Any]:
    """解析 JSON 信封，不检查 errno。"""
    try:
        data = response.json()
    except ValueError as e:
        raise PanError(operation, ErrorType.JSON_PARSE_ERROR, e) from e
    if not isinstance(data, dict):
        raise PanError(operation, ErrorType.JSON_PARSE_ERROR, f"unexpected payload: {data!r}")
    return data


def _check_errno(operation: str, data: dict[str, Any]) -> None:
    errno = int(data.get("errno") or 0)
    if errno:
        raise PanError(
            operation,
            ErrorType.REMOTE_ERROR,
            errno=errno,
            errmsg=data.get("show_msg") or data.get("errmsg") or "",
        )


def handle_json_parse(operation: str, response: httpx.Response) -> dict[str, Any]:
    """解析 JSON 响应；解析失败或 errno 非 0 时抛出 PanError，否则返回整个信封。"""
    data = read_json(operation, response)
    _check_errno(operation, data)
    return data


def decode_pan_json_error(operation: str, response: httpx.Response) -> None:
    """只检查响应信封中的错误，不关心其余字段。"""
    handle_json_parse(operation, response)
