import requests

from . import http_timeout
from ..errors import FetchError


def get_response(sess, url):
    try:
        r = sess.get(url, timeout=http_timeout())
        r.raise_for_status()
    except (requests.RequestException, OSError) as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e
    return r


def get_json(sess, url):
    r = get_response(sess, url)
    try:
        return r.json()
    except ValueError as e:
        raise FetchError(f"Invalid JSON from {url}") from e
