import json
import os
import os.path
import sys
import datetime
from typing import Any

import requests
from cachecontrol import CacheControl  # type: ignore
from cachecontrol.caches import FileCache  # type: ignore

USER_AGENT = "BabricMeta/1.0"


def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)


def serialize_datetime(dt: datetime.datetime):
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc).isoformat()

    return dt.isoformat()


def now_utc() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)


def cache_path():
    if "META_CACHE_DIR" in os.environ:
        return os.environ["META_CACHE_DIR"]
    return "cache"


def output_path():
    if "META_OUTPUT_DIR" in os.environ:
        return os.environ["META_OUTPUT_DIR"]
    return "output"


def manifest_url():
    if "META_MANIFEST_URL" in os.environ:
        return os.environ["META_MANIFEST_URL"]
    return "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"


def _float_env(name: str, default: float) -> float:
    if name in os.environ:
        return float(os.environ[name])
    return default


def http_timeout() -> float:
    return _float_env("META_HTTP_TIMEOUT", 30)


def profile_timeout() -> float:
    return _float_env("META_PROFILE_TIMEOUT", 60)


def refresh_interval() -> float:
    return _float_env("META_REFRESH_INTERVAL", 60)


def ensure_output_dir(path):
    path = os.path.join(output_path(), path)
    if not os.path.exists(path):
        os.makedirs(path)
    return path


def get_maven_url(maven_key: str, server: str, ext: str):
    parts = maven_key.split(":", 3)
    maven_ver_url = (
        server + parts[0].replace(".", "/") + "/" + parts[1] + "/" + parts[2] + "/"
    )
    return maven_ver_url + parts[1] + "-" + parts[2] + ext


def default_session():
    # honours upstream cache headers; nothing is cached forever
    cache = FileCache(os.path.join(cache_path(), "http_cache"))
    sess = CacheControl(requests.Session(), cache)

    sess.headers.update({"User-Agent": USER_AGENT})

    return sess


def write_json(file_path: str, data: Any):
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, sort_keys=True, indent=4)
