from pathlib import Path

# Folders under PUBLIC_DIR that get scanned, in the order their sections are shown
ROOT_FOLDERS = ("Separate Atoms", "Templates")

IMAGE_EXTENSIONS = frozenset({"png", "svg", "jpg", "jpeg", "webp", "gif", "avif", "bmp"})

# First match wins when picking the preview of a merged asset
PREVIEW_ORDER = ("svg", "png", "jpg", "jpeg", "webp", "gif", "avif", "bmp")

SCROLL_OFFSET = 120  # px of lookahead below the top of the viewport for the scroll-spy
OVERLAY_BREAKPOINT = 1024  # px, narrower viewports get the overlay sidebar

PUBLIC_DIR = Path("public")
INDEX_FILE = "index.html"
DATA_FILE = "data.json"

SERVE_HOST = "127.0.0.1"
SERVE_PORT = 8169

PAGE_TITLE = "Assets Gallery"
PAGE_DESCRIPTION = "Preview assets from Separate Atoms and Templates"
PAGE_EYEBROW = "Design Asset Library"
PAGE_HEADING = "Preview every asset"

CREDIT_NAME = "Open Peeps"
CREDIT_URL = "https://www.openpeeps.com/"
CREDIT_AUTHOR = "Pablo Stanley"
SUPPORT_URL = "https://pablostanley.gumroad.com/l/openpeeps?wanted=true&referrer=https%3A%2F%2Fwww.openpeeps.com%2F"
