import re

_UNSAFE = re.compile(r"[^a-zA-Z0-9._/-]+")


def partitioned_key(key: str) -> str:
    """Spread keys over two directory levels: ``abcdef`` -> ``ab/cd/abcdef``."""
    safe = _UNSAFE.sub("-", (key or "").strip()).strip("/")
    if not safe or ".." in safe.split("/"):
        raise ValueError(f"invalid blobstore key: {key!r}")
    return f"{safe[0:2]}/{safe[2:4]}/{safe}"
