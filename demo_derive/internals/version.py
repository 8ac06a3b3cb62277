from __future__ import annotations
import sys, platform, datetime
from importlib.metadata import version as _pkg_version, PackageNotFoundError

from demo_derive import __version__ as app_ver, __dev__ as is_dev

def get_versions() -> dict[str, str]:
    try:
        lark_ver = _pkg_version("lark")
    except PackageNotFoundError:
        lark_ver = "unknown"

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": lark_ver,
    }

def print_banner(stream=None) -> None:
    """Version banner; goes to stderr so generated code on stdout stays clean."""
    stream = stream or sys.stderr
    v = get_versions()
    today = datetime.date.today().isoformat()

    # ANSI styling only on an interactive terminal
    if getattr(stream, "isatty", lambda: False)():
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    dev_marker = " (dev)" if is_dev else ""
    print(
        f"{BOLD}demo-derive{RESET} • {v['app']}{dev_marker}\n"
        f"{DIM}Python {v['python']} • lark {v['lark']} • {today}{RESET}\n",
        file=stream,
    )
