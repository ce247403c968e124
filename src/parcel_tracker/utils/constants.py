"""Constants used throughout the Parcel Tracker application."""

from __future__ import annotations


# =============================================================================
# URLs
# =============================================================================

BASE_URL = "https://t.17track.net"
TRACKING_URL = f"{BASE_URL}/es#nums={{tracking_number}}"

# =============================================================================
# Browser
# =============================================================================

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--no-first-run",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
]

# CDP resource types aborted before they reach the network
BLOCKED_RESOURCE_TYPES = ("Image", "Stylesheet", "Font", "Media")

VIEWPORT_WIDTH = 1280
VIEWPORT_HEIGHT = 720

# =============================================================================
# Timeouts (in seconds)
# =============================================================================

NAVIGATION_TIMEOUT = 15.0
SELECTOR_TIMEOUT = 10.0
QUEUE_TIMEOUT = 30.0

# =============================================================================
# Selectors
# =============================================================================

TRACK_LIST_SELECTOR = ".track-container, .tracklist-item"
EVENT_BLOCK_SELECTOR = ".trn-block"
READY_SELECTORS = (TRACK_LIST_SELECTOR, EVENT_BLOCK_SELECTOR)

COURIER_SELECTORS = (".provider-name", ".tracklist-header .provider")
STATUS_SELECTORS = (".text-capitalize[title]", ".trn-block dd:first-child p")

EVENT_SELECTOR = ".trn-block dd"
EVENT_DATE_SELECTOR = "time"
EVENT_DESCRIPTION_SELECTOR = "p"

# =============================================================================
# Placeholders
# =============================================================================

UNKNOWN_COURIER = "Desconocido"
UNKNOWN_STATUS = "Sin información"
UNKNOWN_DATE = "Sin fecha"
UNKNOWN_DESCRIPTION = "Sin descripción"
UNKNOWN_LOCATION = "Sin ubicación"
