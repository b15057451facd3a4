"""
HTTP method descriptors.
"""

from dataclasses import dataclass

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True)
class HttpMethod:
    """HTTP method plus the caching flags that only GET can carry.

    Disk caching is a durability extension of the ETag cache: it takes
    effect only when ETag caching is also enabled.
    """

    name: str
    etag_enabled: bool = False
    disk_cache_enabled: bool = False

    def __post_init__(self):
        if self.name not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method {self.name!r}; expected one of {', '.join(SUPPORTED_METHODS)}")

    @classmethod
    def get(cls, etag_enabled: bool = False, disk_cache_enabled: bool = True) -> "HttpMethod":
        return cls("GET", etag_enabled, disk_cache_enabled)

    @classmethod
    def post(cls) -> "HttpMethod":
        return cls("POST")

    @classmethod
    def put(cls) -> "HttpMethod":
        return cls("PUT")

    @classmethod
    def delete(cls) -> "HttpMethod":
        return cls("DELETE")

    @property
    def is_etag_enabled(self) -> bool:
        return self.name == "GET" and self.etag_enabled

    @property
    def is_disk_cache_enabled(self) -> bool:
        return self.is_etag_enabled and self.disk_cache_enabled

    def __str__(self) -> str:
        return self.name
