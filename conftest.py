import pytest

from playwright.sync_api import sync_playwright, Error as PlaywrightError


@pytest.fixture(scope="session")
def browser():
    with sync_playwright() as p:
        # PDF printing needs headless Chromium
        try:
            browser = p.chromium.launch(
                headless=True,
                args=[
                    "--no-sandbox",
                    "--disable-setuid-sandbox",
                    "--disable-dev-shm-usage",
                    "--disable-gpu",
                ]
            )
        except PlaywrightError as e:
            pytest.skip(f"Chromium not available: {str(e)[:80]}")
        yield browser
        browser.close()


@pytest.fixture
def page(browser):
    context = browser.new_context(viewport={"width": 1366, "height": 768})
    page = context.new_page()
    try:
        yield page
    finally:
        page.close()
        context.close()


@pytest.fixture
def no_waits(monkeypatch):
    """Turn the fixed pauses into no-ops so DOM tests run fast."""
    import resume_pdf

    monkeypatch.setattr(resume_pdf, "wait", lambda page, ms=0: None)
