from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from pathlib import Path
import re

import config


MORE_COUNT_PATTERN = re.compile(r"\+\d+\s+more", re.IGNORECASE)
EXPANSION_PHRASES = ("show more", "expand", "view more")


class BlockedError(RuntimeError):
    """Navigation ended somewhere other than the resume page."""


def wait(page, ms: int = 500):
    """Small wrapper around Playwright timeout to keep calls consistent."""
    page.wait_for_timeout(ms)


def banner(title):
    print("\n" + "="*70)
    print(f"📍 {title}")
    print("="*70)


def is_challenge_page(title, url) -> bool:
    """True when the title or URL carries a bot-challenge marker."""
    title = title or ""
    url = url or ""
    return (any(marker in title for marker in config.CHALLENGE_TITLE_MARKERS)
            or any(marker in url for marker in config.CHALLENGE_URL_MARKERS))


def is_more_count_text(text) -> bool:
    """Match counters like '+11 more' (whole text, any case)."""
    return MORE_COUNT_PATTERN.fullmatch((text or "").strip()) is not None


def is_expansion_text(text) -> bool:
    """Heuristic for 'See more' / '+N more' / 'Show more' / 'Expand' controls."""
    lowered = (text or "").lower()
    if "see" in lowered and "more" in lowered:
        return True
    if is_more_count_text(text):
        return True
    return any(phrase in lowered for phrase in EXPANSION_PHRASES)


def wait_for_challenge(page, timeout: int = config.CHALLENGE_TIMEOUT_MS) -> bool:
    """Give a challenge page time to clear. Returns True if one was seen."""
    print("  🛡️  Page loaded, checking for Cloudflare challenge...")
    wait(page, config.PAGE_SETTLE_MS)

    title = page.title()
    url = page.url
    print(f"    Current page title: {title}")
    print(f"    Current URL: {url}")

    if not is_challenge_page(title, url):
        return False

    print("  ⏳ Cloudflare challenge detected, waiting for completion...")
    try:
        page.wait_for_function(
            "markers => !markers.some(marker => document.title.includes(marker))",
            arg=list(config.CHALLENGE_TITLE_MARKERS),
            timeout=timeout,
        )
        print("    ✓ Challenge cleared")
    except PlaywrightTimeoutError:
        print("    ⚠️  Cloudflare challenge may still be active, proceeding anyway...")

    wait(page, config.CHALLENGE_SETTLE_MS)
    return True


def ensure_target_reached(page, marker: str = config.TARGET_URL_MARKER):
    """Raise BlockedError unless the page ended up on the resume URL."""
    if marker not in page.url:
        raise BlockedError(
            "Failed to reach the resume page, might be blocked by Cloudflare "
            f"(ended on {page.url})"
        )
    print("  ✅ Successfully bypassed protection, handling page interactions...")


def dismiss_cookie_banner(page, timeout: int = config.COOKIE_BANNER_TIMEOUT_MS) -> bool:
    """Click away the privacy banner if it shows up within `timeout`."""
    print("  🍪 Looking for cookie banner...")
    try:
        page.wait_for_selector(config.COOKIE_BANNER_SELECTOR, timeout=timeout)
        print("    Cookie banner found, dismissing...")
        page.click(config.COOKIE_BUTTON_SELECTOR, timeout=timeout)
        wait(page, config.SHORT_SETTLE_MS)
        print("    ✓ Cookie banner dismissed")
        return True
    except PlaywrightError:
        print("    ℹ️  No cookie banner found or already dismissed")
        return False


def remove_layout_elements(page) -> list:
    """Drop the footer, fixed bars and tab strip so they don't print."""
    removed = page.evaluate("""
        (targets) => {
            const removed = [];
            for (const [label, selector] of targets) {
                const el = document.querySelector(selector);
                if (el) {
                    el.remove();
                    removed.push(label);
                }
            }
            return removed;
        }
    """, [list(target) for target in config.LAYOUT_SELECTORS])

    for label, _ in config.LAYOUT_SELECTORS:
        if label in removed:
            print(f"    ✓ Removed {label} element")
        else:
            print(f"    ℹ️  {label} element not found")
    return removed


def scroll_through_page(page, interval_ms: int = config.SCROLL_INTERVAL_MS,
                        step_px: int = config.SCROLL_STEP_PX,
                        max_steps: int = config.MAX_SCROLL_STEPS) -> int:
    """Walk down the page in small steps so lazy content loads, then go back to top.

    The page height is re-read on every step, so content that appears while
    scrolling extends the walk. Returns the number of steps taken.
    """
    print("  📜 Scrolling to load all content...")
    travelled = 0
    steps = 0

    while steps < max_steps:
        scroll_height = page.evaluate("document.body.scrollHeight")
        page.evaluate("(dy) => window.scrollBy(0, dy)", step_px)
        travelled += step_px
        steps += 1
        if travelled >= scroll_height:
            break
        wait(page, interval_ms)

    print(f"    ✓ Finished scrolling after {steps} steps, waiting for lazy content...")
    wait(page, config.LAZY_LOAD_SETTLE_MS)

    # Back to top for better PDF appearance
    page.evaluate("window.scrollTo(0, 0)")
    wait(page, config.SHORT_SETTLE_MS)
    return steps


CLICK_INNERMOST_JS = """
    (elements, expected) => {
        const targets = [];
        for (const [idx, text] of expected) {
            const el = elements[idx];
            // the page changed since the texts were read
            if (el && (el.textContent || '') === text) {
                targets.push(el);
            }
        }
        const clicked = [];
        const failed = [];
        for (const el of targets) {
            // a matching ancestor would toggle the same control twice
            if (targets.some(other => other !== el && el.contains(other))) {
                continue;
            }
            const text = (el.textContent || '').trim();
            try {
                el.scrollIntoView({block: 'center'});
                el.click();
                clicked.push(text);
            } catch (e) {
                failed.push(text);
            }
        }
        return {clicked, failed, stale: expected.length - targets.length};
    }
"""


def click_matching(page, selector, predicate, settle_ms: int = config.EXPANSION_SETTLE_MS) -> list:
    """Click every element under `selector` whose text passes `predicate`.

    Text is read in one round trip and filtered here, the clicks happen as
    DOM clicks in a second one. An element whose text changed in between is
    skipped rather than clicked. Returns the trimmed texts that were clicked.
    """
    elements = page.locator(selector)
    texts = elements.all_text_contents()
    expected = [[idx, text] for idx, text in enumerate(texts) if predicate(text)]
    if not expected:
        return []

    outcome = elements.evaluate_all(CLICK_INNERMOST_JS, expected)
    for text in outcome["failed"]:
        print(f"    ⚠️  Could not click element: {text[:50]}")
    if outcome["stale"]:
        print(f"    ℹ️  Skipped {outcome['stale']} element(s) that changed before clicking")

    if outcome["clicked"]:
        wait(page, settle_ms)
    return outcome["clicked"]


def hide_show_less(page, text: str = config.SHOW_LESS_TEXT) -> int:
    """Hide collapse controls so they don't end up in the PDF."""
    return page.evaluate("""
        (needle) => {
            let hidden = 0;
            for (const el of document.querySelectorAll('span')) {
                const text = el.textContent || el.innerText || '';
                if (text.includes(needle)) {
                    el.style.display = 'none';
                    hidden++;
                }
            }
            return hidden;
        }
    """, text)


def expand_sections(page) -> list:
    """Click all 'See more' style controls (two passes) and tidy up after them."""
    banner("EXPANDING ALL SECTIONS")
    print('  🔍 Looking for "See More" buttons to expand all content...')

    clicked = click_matching(page, config.FIRST_PASS_SELECTOR, is_expansion_text)
    if not clicked:
        print("  ℹ️  No expansion buttons found or all content already expanded")
        return []

    print(f"  ✓ Clicked {len(clicked)} expansion buttons: {clicked}")
    wait(page, config.FIRST_PASS_SETTLE_MS)

    # Counters like "+7 more" sometimes only appear after the first expansion
    print("  🔍 Looking for additional expansion buttons...")
    second = click_matching(page, config.SECOND_PASS_SELECTOR, is_more_count_text)
    if second:
        print(f"  ✓ Second pass clicked {len(second)} more buttons: {second}")
        wait(page, config.SECOND_PASS_SETTLE_MS)
        clicked.extend(second)

    hidden = hide_show_less(page)
    print(f'  🙈 Hid {hidden} "Show Less" control(s) for a clean PDF')

    print("  📜 Re-scrolling to load all newly expanded content...")
    scroll_through_page(page, interval_ms=config.RESCROLL_INTERVAL_MS)
    return clicked


def generate_pdf(page, path) -> Path:
    """Print the current page to a multi-page A4 PDF at `path`."""
    banner("GENERATING MULTI-PAGE PDF")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    print(f"  💾 Saving: {path.name}")
    page.pdf(path=str(path), **config.PDF_OPTIONS)
    print(f"  ✅ PDF SAVED: {path}")
    print("="*70)
    return path
