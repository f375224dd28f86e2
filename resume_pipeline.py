from playwright.sync_api import sync_playwright
from playwright.sync_api import Error as PlaywrightError
from pathlib import Path
import sys
import time
import traceback

import config
from resume_pdf import (
    banner,
    dismiss_cookie_banner,
    ensure_target_reached,
    expand_sections,
    generate_pdf,
    remove_layout_elements,
    scroll_through_page,
    wait_for_challenge,
)

try:
    sys.stdout.reconfigure(errors="ignore")
except Exception:
    pass


AUTOMATIC = "automatic"
MANUAL = "manual"

RECOVERY_TIPS = [
    "1. Try running the script multiple times",
    "2. Use a VPN or different IP address",
    "3. Wait a few minutes between attempts",
    "4. The browser window will stay open - you can manually solve any challenges",
]


def _launch_chromium(p, **kwargs):
    """Prefer installed Chrome, fall back to Playwright's bundled Chromium."""
    try:
        return p.chromium.launch(channel="chrome", **kwargs)
    except PlaywrightError as e:
        print(f"Failed to launch Chrome: {str(e)[:80]}")
        print("Falling back to Chromium...")
        return p.chromium.launch(**kwargs)


def launch_browser(p, manual: bool = False):
    """Start the browser and a context for the chosen mode.

    Manual mode gets a plain maximized window the user drives by hand.
    Automatic mode gets the hardened launch flags, a desktop user agent,
    browser-like headers and the webdriver flag hidden.
    """
    if manual:
        # Must be visible for manual intervention
        browser = _launch_chromium(p, headless=False, args=config.MANUAL_LAUNCH_ARGS)
        context = browser.new_context(no_viewport=True)
        return browser, context

    browser = _launch_chromium(
        p,
        headless=config.HEADLESS,
        args=config.LAUNCH_ARGS,
        ignore_default_args=config.IGNORE_DEFAULT_ARGS,
    )
    context = browser.new_context(
        viewport=config.VIEWPORT,
        device_scale_factor=config.DEVICE_SCALE_FACTOR,
        user_agent=config.USER_AGENT,
        extra_http_headers=config.EXTRA_HTTP_HEADERS,
    )
    context.add_init_script(config.HIDE_WEBDRIVER_SCRIPT)
    return browser, context


def process_page(page, cookie_timeout: int = config.COOKIE_BANNER_TIMEOUT_MS):
    """Shared clean-up and expansion steps run before printing."""
    banner("PREPARING PAGE")
    dismiss_cookie_banner(page, timeout=cookie_timeout)

    try:
        remove_layout_elements(page)
    except PlaywrightError as e:
        print(f"  ⚠️  Layout cleanup warning: {str(e)[:50]}")

    scroll_through_page(page)
    return expand_sections(page)


def report_failure(error):
    """Print the error and, if it looks like a block, what to try next."""
    message = str(error)
    print(f"\n❌ Error occurred: {message}")

    lowered = message.lower()
    if "cloudflare" in lowered or "blocked" in lowered:
        print("\n🛡️  Cloudflare Protection Tips:")
        for tip in RECOVERY_TIPS:
            print(f"   {tip}")


def run_automatic(pdf_path=None, hold_ms=None):
    """Fully automated run. Returns the PDF path, or None if it failed."""
    pdf_path = Path(pdf_path or config.OUTPUT_DIR / config.AUTO_PDF_NAME)
    hold_ms = config.MANUAL_HOLD_MS if hold_ms is None else hold_ms

    banner("AUTOMATIC BYPASS")
    print(f"🌐 URL: {config.TARGET_URL}")
    print(f"📂 Output: {pdf_path}")

    browser = None
    result = None

    try:
        with sync_playwright() as p:
            try:
                browser, context = launch_browser(p)
                page = context.new_page()

                print("\n⏳ Navigating to the resume page...")
                page.goto(
                    config.TARGET_URL,
                    wait_until="domcontentloaded",
                    timeout=config.NAVIGATION_TIMEOUT_MS,
                )

                wait_for_challenge(page)
                ensure_target_reached(page)
                process_page(page)

                result = generate_pdf(page, pdf_path)
                print("\n🎉 SUCCESS!")
                print(f"📄 Complete multi-page resume PDF saved at: {result}")

            except Exception as e:
                traceback.print_exc()
                report_failure(e)

            finally:
                # Keep browser open for manual intervention if needed
                if browser is not None:
                    print(f"\n⏳ Browser will remain open for {hold_ms // 1000} seconds for manual intervention...")
                    time.sleep(hold_ms / 1000)
                    browser.close()
                    print("✅ Browser closed")

    except Exception as e:
        # Playwright driver failed to start or shut down
        traceback.print_exc()
        report_failure(e)

    return result


def run_manual(prompt=input, pdf_path=None):
    """Let a human clear the challenge, then expand and print the page."""
    pdf_path = Path(pdf_path or config.OUTPUT_DIR / config.MANUAL_PDF_NAME)

    banner("MANUAL BYPASS")

    with sync_playwright() as p:
        browser, context = launch_browser(p, manual=True)
        page = context.new_page()

        try:
            try:
                page.goto(
                    config.TARGET_URL,
                    wait_until="domcontentloaded",
                    timeout=config.NAVIGATION_TIMEOUT_MS,
                )
            except PlaywrightError as e:
                print(f"  ⚠️  Could not open the page automatically: {str(e)[:80]}")

            print("Browser opened. Please manually:")
            print(f"1. Navigate to: {config.TARGET_URL} (if it is not already open)")
            print("2. Complete any Cloudflare challenges")
            print("3. Wait for the resume page to load completely")
            prompt("4. Press Enter in this terminal when ready...")

            print("\n⚙️  Processing page...")
            process_page(page, cookie_timeout=config.SHORT_SETTLE_MS)

            result = generate_pdf(page, pdf_path)
            print(f"📄 PDF saved at: {result}")
            return result

        finally:
            browser.close()
            print("✅ Browser closed")


def parse_mode(argv) -> str:
    """'2' (or 'manual') picks manual mode; anything else is automatic."""
    method = (argv[0] if argv else "1").strip().lower()
    return MANUAL if method in ("2", MANUAL) else AUTOMATIC


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    print("Choose bypass method:")
    print("1. Automatic bypass (default)")
    print("2. Manual bypass (recommended for Cloudflare)")

    if parse_mode(argv) == MANUAL:
        try:
            run_manual()
        except Exception as e:
            traceback.print_exc()
            report_failure(e)
            return 1
        print("Manual bypass completed")
        return 0

    result = run_automatic()
    print("Automatic bypass completed")
    return 0 if result else 1


if __name__ == "__main__":
    sys.exit(main())
