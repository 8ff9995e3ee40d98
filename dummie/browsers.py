"""Locate a Chrome / Chromium executable for the translation fallback."""

import os
import sys
from typing import Dict, List, Optional

# Common install locations by platform
CHROME_PATHS: Dict[str, List[str]] = {
    'win32': [
        'C:/Program Files/Google/Chrome/Application/chrome.exe',
        'C:/Program Files (x86)/Google/Chrome/Application/chrome.exe',
        os.path.join(os.environ.get('LOCALAPPDATA', ''), 'Google/Chrome/Application/chrome.exe'),
    ],
    'darwin': [
        '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
        '/Applications/Chromium.app/Contents/MacOS/Chromium',
    ],
    'linux': [
        '/usr/bin/google-chrome',
        '/usr/bin/chromium-browser',
        '/usr/bin/chromium',
    ],
}


def candidate_paths(platform: str = sys.platform) -> List[str]:
    if platform.startswith('linux'):
        platform = 'linux'
    return CHROME_PATHS.get(platform, [])


def default_chrome_path(platform: str = sys.platform) -> Optional[str]:
    """CHROME_PATH from the environment, else the usual location for this platform"""
    env_path = os.environ.get('CHROME_PATH')
    if env_path:
        return env_path
    paths = candidate_paths(platform)
    return paths[0] if paths else None


def find_chrome(platform: str = sys.platform) -> Optional[str]:
    """Return the first candidate path that exists, or None"""
    for path in candidate_paths(platform):
        if os.path.exists(path):
            return path
    return None


def env_hint(path: str, platform: str = sys.platform) -> str:
    if platform == 'win32':
        return f'setx CHROME_PATH "{path}"'
    return f'export CHROME_PATH="{path}"'
