"""
Configuration and constants for the resume PDF exporter.
Loads environment variables and defines all shared settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes")


# --- Target page ---
TARGET_URL = os.getenv(
    "TARGET_URL", "https://talent.toptal.com/resume/developers/guilherme-natal"
)
TARGET_URL_MARKER = os.getenv("TARGET_URL_MARKER", "talent.toptal.com/resume")

# --- Output ---
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR") or Path(__file__).resolve().parent)
AUTO_PDF_NAME = "guilherme-natal-resume-complete.pdf"
MANUAL_PDF_NAME = "guilherme-natal-resume-manual-complete.pdf"

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {"top": "0.5in", "bottom": "0.5in", "left": "0.5in", "right": "0.5in"},
    "display_header_footer": False,
    "prefer_css_page_size": False,
}

# --- Browser ---
HEADLESS = _env_flag("HEADLESS", False)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-features=VizDisplayCompositor",
    "--disable-web-security",
    "--disable-features=TranslateUI",
    "--disable-ipc-flooding-protection",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--disable-client-side-phishing-detection",
    "--no-first-run",
    "--no-default-browser-check",
    "--disable-default-apps",
    "--disable-popup-blocking",
    "--disable-translate",
    "--disable-background-timer-throttling",
    "--disable-field-trial-config",
    "--disable-back-forward-cache",
    "--disable-background-networking",
    "--enable-features=NetworkService,NetworkServiceInProcess",
    "--disable-component-update",
    "--disable-domain-reliability",
    "--disable-extensions",
    "--disable-print-preview",
    "--disable-speech-api",
    "--disable-sync",
    "--hide-scrollbars",
    "--mute-audio",
    "--no-pings",
    "--use-mock-keychain",
    "--disable-gpu",
]
IGNORE_DEFAULT_ARGS = ["--enable-automation"]
MANUAL_LAUNCH_ARGS = ["--start-maximized"]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
VIEWPORT = {"width": 1366, "height": 768}
DEVICE_SCALE_FACTOR = 1

# --- Request Headers (sent with every request of the hardened context) ---
EXTRA_HTTP_HEADERS = {
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}

HIDE_WEBDRIVER_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
"""

# --- Challenge detection ---
CHALLENGE_TITLE_MARKERS = ("Just a moment", "Cloudflare")
CHALLENGE_URL_MARKERS = ("cf-browser-verification",)

# --- Selectors ---
COOKIE_BANNER_SELECTOR = '[data-testid="Banner:PRIVACY_SHIELD"]'
COOKIE_BUTTON_SELECTOR = f"{COOKIE_BANNER_SELECTOR} button"

# Page chrome removed before printing (label, selector)
LAYOUT_SELECTORS = [
    ("footer", ".Layout___StyledPageFooter-sc-1uaeije-5"),
    ("mui-fixed", ".mui-fixed"),
    ("tabs", '[data-testid="resume-page-tabs"]'),
]

FIRST_PASS_SELECTOR = (
    'button, a, [role="button"], span[class*="clickable"], '
    'div[class*="clickable"], [onclick]'
)
SECOND_PASS_SELECTOR = 'button, a, [role="button"], span, div'
SHOW_LESS_TEXT = "Show Less"

# --- Timings (milliseconds) ---
NAVIGATION_TIMEOUT_MS = 120_000
PAGE_SETTLE_MS = 5000
CHALLENGE_TIMEOUT_MS = 30_000
CHALLENGE_SETTLE_MS = 3000
COOKIE_BANNER_TIMEOUT_MS = 5000
SHORT_SETTLE_MS = 1000
LAZY_LOAD_SETTLE_MS = 3000
SCROLL_STEP_PX = 100
SCROLL_INTERVAL_MS = 100
RESCROLL_INTERVAL_MS = 150
MAX_SCROLL_STEPS = 1000
EXPANSION_SETTLE_MS = 2000
FIRST_PASS_SETTLE_MS = 4000
SECOND_PASS_SETTLE_MS = 3000
MANUAL_HOLD_MS = int(os.getenv("MANUAL_HOLD_MS", "30000"))
