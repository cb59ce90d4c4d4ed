"""Worker process settings and locating the worker binary."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Mapping, Optional, Sequence

VERSION = "3.6.37"

_DEFAULT_UNIX_HOME = "/usr/local/lib/node_modules/mediasoup"


class WorkerLogLevel(str, Enum):
    DEBUG = "debug"
    WARN = "warn"
    ERROR = "error"
    NONE = "none"


class WorkerLogTag(str, Enum):
    INFO = "info"
    ICE = "ice"
    DTLS = "dtls"
    RTP = "rtp"
    SRTP = "srtp"
    RTCP = "rtcp"
    RTX = "rtx"
    BWE = "bwe"
    SCORE = "score"
    SIMULCAST = "simulcast"
    SVC = "svc"
    SCTP = "sctp"
    MESSAGE = "message"


@dataclass(frozen=True)
class WorkerResourceUsage:
    """Resource usage of the worker process, as reported by getrusage."""

    ru_utime: int = 0
    ru_stime: int = 0
    ru_maxrss: int = 0
    ru_ixrss: int = 0
    ru_idrss: int = 0
    ru_isrss: int = 0
    ru_minflt: int = 0
    ru_majflt: int = 0
    ru_nswap: int = 0
    ru_inblock: int = 0
    ru_oublock: int = 0
    ru_msgsnd: int = 0
    ru_msgrcv: int = 0
    ru_nsignals: int = 0
    ru_nvcsw: int = 0
    ru_nivcsw: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkerResourceUsage":
        return cls(**{f.name: int(data.get(f.name, 0)) for f in fields(cls)})


def _is_windows(platform: str) -> bool:
    return platform.lower().startswith("win")


def resolve_worker_bin(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[str] = None,
) -> str:
    """Locate the worker binary from the environment.

    ``MEDIASOUP_WORKER_BIN`` wins when set; otherwise the path is built from
    ``MEDIASOUP_HOME`` (or a platform default) and ``MEDIASOUP_BUILDTYPE``.
    """
    if environ is None:
        environ = os.environ
    if platform is None:
        platform = sys.platform

    worker_bin = environ.get("MEDIASOUP_WORKER_BIN", "")
    if worker_bin:
        return worker_bin

    build_type = environ.get("MEDIASOUP_BUILDTYPE", "")
    if build_type != "Debug":
        build_type = "Release"

    path_type = PureWindowsPath if _is_windows(platform) else PurePosixPath

    mediasoup_home = environ.get("MEDIASOUP_HOME", "")
    if mediasoup_home:
        base = path_type(mediasoup_home)
    elif _is_windows(platform):
        home_dir = home if home is not None else str(Path.home())
        base = path_type(home_dir, "AppData", "Roaming", "npm", "node_modules", "mediasoup")
    else:
        base = path_type(_DEFAULT_UNIX_HOME)

    return str(base / "worker" / "out" / build_type / "mediasoup-worker")


def split_worker_command(worker_bin: str, args: Sequence[str]) -> tuple[str, list[str]]:
    """Split a worker command that may carry its own leading arguments.

    Returns the executable and the full argument list.
    """
    program = worker_bin.strip()
    words = program.split()
    if len(words) > 1:
        return words[0], [*words[1:], *args]
    return program, list(args)


WORKER_BIN = resolve_worker_bin()