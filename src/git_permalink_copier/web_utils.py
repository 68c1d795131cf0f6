import logging
import sys
import webbrowser

import requests

logger = logging.getLogger(__name__)


def check_permalink_resolves(url: str, timeout: float = 10) -> bool:
    """
    Checks that the forge serves the permalink, i.e. the commit really is published.
    Private repositories answer 404 to anonymous requests, so a failure here is only a warning.
    """
    page_url = url.split('#')[0]
    try:
        response = requests.head(page_url, allow_redirects=True, timeout=timeout)
        if response.status_code == 405:  # Some forges don't allow HEAD
            response = requests.get(page_url, timeout=timeout)
        response.raise_for_status()  # Raises an HTTPError for bad responses (4XX or 5XX)
        return True
    except requests.exceptions.RequestException as e:
        print(f"⚠️ Could not verify {page_url}: {e}", file=sys.stderr)
        return False


def open_url_in_browser(url: str) -> None:
    print(f"🌐 Attempting to open {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error as e:  # webbrowser.Error is the base class for errors from this module
        print(f"⚠️ Could not open URL '{url}' in browser: {e}. Please open manually.")
