"""
key_rotator/handlers/reload.py — Ask running services to reload credentials.

Meant to run after a storing handler (Secrets Manager or Vault): each
service exposes POST /reload-credentials and re-reads the store. A service
that cannot be reached is logged and skipped; the key has already been
stored, so rejecting it here would orphan the stored copy.
"""
import logging

import requests

from key_rotator.models import AccessKey

log = logging.getLogger(__name__)


def reload_service(url: str, timeout: int = 10) -> bool:
    """Tell a service to reload its credentials from the secrets backend."""
    try:
        resp = requests.post(f"{url.rstrip('/')}/reload-credentials", timeout=timeout)
        if resp.status_code == 200:
            log.info(f"  [OK] {url} credentials reloaded")
            return True
        else:
            log.warning(f"  [WARN] {url} reload returned {resp.status_code}")
            return False
    except requests.RequestException as e:
        log.warning(f"  [WARN] Could not reach {url}: {e}")
        return False


class ServiceReloadHandler:
    def __init__(self, urls: list[str], timeout: int = 10) -> None:
        self.urls = list(urls)
        self.timeout = timeout

    def __call__(self, key: AccessKey) -> None:
        log.info(f"Reloading {len(self.urls)} service(s) for key {key.key_id}")
        for url in self.urls:
            reload_service(url, timeout=self.timeout)
