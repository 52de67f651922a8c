"""
pcsshare CLI：登录 cookie 保存到本地一次，之后的分享命令都使用它。
"""

from __future__ import annotations

import getpass
import json
import logging
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from pcsshare import PCSClient, PanError, ShareOption, extract_source_id
from pcsshare.cli_config import clear_config, load_cookies, parse_cookie_string, save_cookies

app = typer.Typer(
    name="pcs",
    help="Baidu netdisk share CLI. Save login cookies once; use them for all share commands.",
)

share_app = typer.Typer(help="Share subcommands")
app.add_typer(share_app, name="share")

_pwd_option: type = Annotated[
    str,
    typer.Option("--pwd", "-p", help="Share password (default: taken from ?pwd= in the URL)"),
]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests to stderr")] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s | %(levelname)8s | %(name)s | %(message)s")


def _get_client() -> PCSClient | None:
    cookies = load_cookies()
    if not cookies:
        return None
    return PCSClient(bduss=cookies["BDUSS"], stoken=cookies.get("STOKEN"), timeout=30.0)


def _require_client() -> PCSClient:
    client = _get_client()
    if client is None:
        typer.echo("error: no saved credentials. run 'pcs login'", err=True)
        raise typer.Exit(1)
    return client


def _parse_share(url: str, pwd: str) -> tuple[str, str]:
    """分享链接或短码 -> (source_id, 提取码)；--pwd 优先于链接中的 pwd。"""
    try:
        source_id, url_pwd = extract_source_id(url)
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    return source_id, pwd or url_pwd


# ------------------------- login / logout / info -------------------------


@app.command("login", help="Save BDUSS/STOKEN cookies to local config")
def login(
    bduss: Annotated[Optional[str], typer.Option("--bduss", help="BDUSS cookie")] = None,
    stoken: Annotated[Optional[str], typer.Option("--stoken", help="STOKEN cookie (needed for transfer)")] = None,
    cookie: Annotated[
        Optional[str],
        typer.Option("--cookie", help="Cookie header copied from the browser; BDUSS/STOKEN are picked from it"),
    ] = None,
) -> None:
    cookies: dict[str, Optional[str]] = dict(parse_cookie_string(cookie)) if cookie else {}
    # 单独给出的 --bduss/--stoken 优先于 --cookie
    if bduss:
        cookies["BDUSS"] = bduss
    if stoken:
        cookies["STOKEN"] = stoken
    if not cookies.get("BDUSS"):
        cookies["BDUSS"] = getpass.getpass("BDUSS: ")
    try:
        saved = save_cookies(cookies)
    except ValueError:
        typer.echo("error: BDUSS required", err=True)
        raise typer.Exit(1)
    typer.echo(f"Saved: {', '.join(saved)}")


@app.command("logout", help="Clear saved credentials")
def logout() -> None:
    if clear_config():
        typer.echo("Cleared.")
    else:
        typer.echo("No saved credentials.")


@app.command("info", help="Show whether credentials are saved")
def info_cmd() -> None:
    cookies = load_cookies()
    if not cookies:
        typer.echo("Not logged in. Run 'pcs login'.")
        return
    typer.echo("bduss: yes")
    typer.echo(f"stoken: {'yes' if cookies.get('STOKEN') else 'no'}")


# ------------------------- share -------------------------


@share_app.command("set", help="Create a share link for remote paths")
def share_set_cmd(
    paths: Annotated[list[str], typer.Argument(help="Remote absolute paths, e.g. /apps/foo.txt")],
    pwd: Annotated[str, typer.Option("--pwd", "-p", help="Share password (4 chars, empty for public)")] = "",
    period: Annotated[int, typer.Option("--period", help="Valid days, 0 = permanent")] = 0,
) -> None:
    client = _require_client()
    try:
        shared = client.share_set(paths, ShareOption(password=pwd, period=period))
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo(f"shareid: {shared.share_id}")
    typer.echo(f"link: {shared.link}")
    if pwd:
        typer.echo(f"pwd: {pwd}")


@share_app.command("list", help="List my shares")
def share_list_cmd(
    page: Annotated[int, typer.Option("--page", help="Page number, starting at 1")] = 1,
) -> None:
    client = _require_client()
    try:
        records = client.share_list(page)
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    for r in records:
        if r is None:
            continue
        pwd = r.passwd if r.has_passwd() else "-"
        typer.echo(f"  {r.share_id}  {r.shortlink}  {pwd}  {r.typical_path}")


@share_app.command("cancel", help="Cancel shares by share id")
def share_cancel_cmd(
    share_ids: Annotated[list[int], typer.Argument(help="Share ids")],
) -> None:
    client = _require_client()
    try:
        client.share_cancel(share_ids)
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo("Cancelled.")


@share_app.command("verify", help="Verify a share password")
def share_verify_cmd(
    url: Annotated[str, typer.Argument(help="Share URL or short code")],
    pwd: _pwd_option = "",
) -> None:
    source_id, pwd = _parse_share(url, pwd)
    client = _require_client()
    try:
        client.share_verify(source_id, pwd)
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo("OK.")


@share_app.command("parse", help="Print share metadata (uk, shareid, fs_id list) as JSON")
def share_parse_cmd(
    url: Annotated[str, typer.Argument(help="Share URL or short code")],
    pwd: _pwd_option = "",
) -> None:
    source_id, pwd = _parse_share(url, pwd)
    client = _require_client()
    try:
        file_info = client.share_parse(source_id, pwd)
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    typer.echo(json.dumps(asdict(file_info), ensure_ascii=False, indent=2))


@share_app.command("transfer", help="Save shared files into my netdisk")
def share_transfer_cmd(
    url: Annotated[str, typer.Argument(help="Share URL or short code")],
    dest: Annotated[str, typer.Argument(help="Destination directory in my netdisk")] = "/",
    pwd: _pwd_option = "",
) -> None:
    source_id, pwd = _parse_share(url, pwd)
    client = _require_client()
    try:
        errno = client.share_transfer(source_id, pwd, dest)
    except PanError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        client.close()
    if errno != 0:
        typer.echo(f"error: transfer errno {errno}", err=True)
        raise typer.Exit(1)
    typer.echo("Transferred.")


# ------------------------- main -------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
