import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def make_session() -> requests.Session:
    """Pooled session that sends each request exactly once.

    Provider calls are terminal per analysis: a 5xx, 429 or connection error
    goes straight back to the caller instead of being replayed.
    """
    s = requests.Session()
    no_retries = Retry(total=0, connect=0, read=0, redirect=0, status=0, raise_on_status=False)
    s.mount("https://", HTTPAdapter(max_retries=no_retries, pool_connections=10, pool_maxsize=10))
    s.mount("http://", HTTPAdapter(max_retries=no_retries, pool_connections=10, pool_maxsize=10))
    s.headers.update({
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": "CodeHut/1.0",
    })
    return s
