"""Shared constants for scraping with curl_cffi browser impersonation."""

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
}

# Substrings that mark an anti-bot interstitial instead of a listing page
BLOCK_PAGE_MARKERS = (
    "px-captcha",
    "Press & Hold",
    "captcha-delivery.com",
    "<title>Access Denied</title>",
    "Please verify you are a human",
)
