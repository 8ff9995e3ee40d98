"""
translate - translate text through Google's public endpoint, falling back to
scraping translate.google.com in a headless browser when the API call fails.
"""

import logging
import os
from typing import Optional
from urllib.parse import quote

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .browsers import default_chrome_path

logger = logging.getLogger(__name__)

API_URL = "https://translate.googleapis.com/translate_a/single"
WEB_URL = "https://translate.google.com/?sl={src}&tl={dest}&text={text}&op=translate"
RESULT_SELECTOR = 'span[jsname="W297wb"]'
BROWSER_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']

DEFAULT_TIMEOUT = 10
DEFAULT_BROWSER_TIMEOUT = 5000


class TranslationError(Exception):
    """Neither the API nor the browser produced a translation."""


def translate_http(text: str, from_lang: str, to_lang: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    params = {
        "client": "gtx",
        "sl": from_lang,
        "tl": to_lang,
        "dt": "t",
        "q": text,
    }
    response = requests.get(API_URL, params=params, timeout=timeout)
    response.raise_for_status()

    # [[["translated", "original", ...], ...], ...]
    data = response.json()
    try:
        segments = data[0]
        translated = "".join(segment[0] for segment in segments if segment and segment[0])
    except (IndexError, KeyError, TypeError) as e:
        raise ValueError(f"Unexpected response format: {e}") from e
    if not translated:
        raise ValueError("Empty translation in response")
    return translated


def translate_browser(text: str, from_lang: str, to_lang: str,
                      chrome_path: Optional[str] = None,
                      timeout: int = DEFAULT_BROWSER_TIMEOUT) -> str:
    """Scrape the translation from the rendered translate.google.com page"""
    url = WEB_URL.format(src=quote(from_lang), dest=quote(to_lang), text=quote(text, safe=""))
    executable = chrome_path if chrome_path and os.path.exists(chrome_path) else None
    if chrome_path and executable is None:
        logger.debug("Chrome not found at %s, using bundled Chromium", chrome_path)

    with sync_playwright() as p:
        browser = p.chromium.launch(executable_path=executable, headless=True, args=BROWSER_ARGS)
        try:
            page = browser.new_page()
            page.goto(url, wait_until="networkidle")
            page.wait_for_selector(RESULT_SELECTOR, timeout=timeout)
            result = page.text_content(RESULT_SELECTOR) or ""
        finally:
            browser.close()

    if not result:
        raise ValueError("No translated text found on page")
    return result


def translate_text(text: str, from_lang: str = "en", to_lang: str = "vi", config=None) -> str:
    """
    Translate `text` from `from_lang` to `to_lang`.
    Tries the HTTP API first, then the browser. Raises TranslationError if
    both fail.
    """
    timeout = DEFAULT_TIMEOUT
    browser_timeout = DEFAULT_BROWSER_TIMEOUT
    chrome_path = os.environ.get('CHROME_PATH')
    if config is not None:
        timeout = config.get("translate", "timeout", timeout)
        browser_timeout = config.get("translate", "browser_timeout", browser_timeout)
        chrome_path = chrome_path or config.get("translate", "chrome_path")
    chrome_path = chrome_path or default_chrome_path()

    try:
        return translate_http(text, from_lang, to_lang, timeout=timeout)
    except (requests.RequestException, ValueError) as http_err:
        logger.warning("HTTP translate failed, falling back to browser: %s", http_err)

        try:
            return translate_browser(text, from_lang, to_lang,
                                     chrome_path=chrome_path, timeout=browser_timeout)
        except (PlaywrightError, ValueError) as browser_err:
            raise TranslationError(
                f"HTTP request failed ({http_err}); browser fallback failed ({browser_err})"
            ) from browser_err
