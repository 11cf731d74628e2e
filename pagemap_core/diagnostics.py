import socket
from typing import Any, Dict
from urllib.parse import urlparse
import requests
import logging
import os


_LOGGER_CACHE: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger.

    Respects PAGEMAP_DEBUG env var to set DEBUG/INFO level.
    Ensures we don't duplicate handlers across multiple imports.
    """
    lg = _LOGGER_CACHE.get(name)
    if lg:
        return lg
    lg = logging.getLogger(name)
    if not lg.handlers:
        level = logging.DEBUG if str(os.getenv("PAGEMAP_DEBUG", "false")).lower() == "true" else logging.INFO
        lg.setLevel(level)
        handler = logging.StreamHandler()
        handler.setLevel(level)
        fmt = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(fmt)
        lg.addHandler(handler)
        lg.propagate = False
    _LOGGER_CACHE[name] = lg
    return lg


def set_log_level(level: str) -> None:
    """Apply `level` to every logger handed out by get_logger."""
    lvl = getattr(logging, level.upper(), logging.INFO)
    for lg in _LOGGER_CACHE.values():
        lg.setLevel(lvl)
        for handler in lg.handlers:
            handler.setLevel(lvl)


def diagnose_url_issue(url: str) -> Dict[str, Any]:
    """Probe DNS, TCP and HTTP reachability of `url` after a failed navigation."""
    out: Dict[str, Any] = {"url": url}
    pr = urlparse(url)
    host = pr.hostname or ""
    out["host"] = host
    out["scheme"] = pr.scheme or ""
    if not host:
        out["dns_resolves"] = False
        out["dns_error"] = "URL has no host"
        return out

    try:
        infos = socket.getaddrinfo(host, None)
    except OSError as e:
        out["dns_resolves"] = False
        out["dns_error"] = str(e)
        return out
    ips = []
    for i in infos:
        ip = i[4][0]
        if ip not in ips:
            ips.append(ip)
    out["dns_resolves"] = True
    out["ips"] = ips

    def _tcp(port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=5):
                return True
        except OSError:
            return False

    out["tcp_443_open"] = _tcp(443)
    out["tcp_80_open"] = _tcp(80)

    try:
        r = requests.get(url, timeout=6, allow_redirects=True)
        out["http_probe"] = {"url": url, "status": r.status_code}
    except requests.exceptions.SSLError as e:
        out["http_probe"] = {"url": url, "ssl_error": str(e)}
    except requests.exceptions.RequestException as e:
        out["http_probe"] = {"url": url, "error": str(e)}
    return out
