from versionlens.cache.file_cache import FileCache, cache_key
from versionlens.cache.session_cache import SessionCache

__all__ = ["FileCache", "SessionCache", "cache_key"]
