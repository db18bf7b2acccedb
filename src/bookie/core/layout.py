"""Page geometry and spacing constants.

All lengths are millimetres, font sizes are points.
"""

# Document
PAGE_ORIENTATION = "P"
PAGE_UNIT = "mm"
PAGE_FORMAT = "A4"
PAGE_MARGIN = 20.0
PAGE_CONTENT_WIDTH = 190.0  # horizontal rule length

# Body text
DEFAULT_LINE_HEIGHT = 5.0
DEFAULT_FONT_SIZE = 12.0
INDENT_WIDTH = 10.0
BLOCKQUOTE_INDENT = 20.0
BLOCK_TRAILING_SPACE = 8.0  # after blockquote, pre and hr
LIST_SPACING = 5.0

# Pagination thresholds, measured up from the bottom edge
HEADING_BREAK_ZONE = 100.0
BLOCK_BREAK_ZONE = 50.0
IMAGE_BREAK_ZONE = 30.0

# Headings: tag -> (font size, leading space)
HEADING_STYLES = {
    "h1": (24.0, 20.0),
    "h2": (20.0, 15.0),
    "h3": (16.0, 10.0),
    "h4": (14.0, 8.0),
    "h5": (14.0, 8.0),
    "h6": (14.0, 8.0),
}

# Code
CODE_FONT = "Courier"
CODE_FONT_SIZE = 10.0
TAB_WIDTH = 4

# Chapter titles
CHAPTER_TITLE_STYLE = "B"
CHAPTER_TITLE_SIZE = 24.0
CHAPTER_LINE_HEIGHT = 10.0
CHAPTER_SPACING = 20.0

# Footer
PAGE_NUMBER_FONT = "Helvetica"
PAGE_NUMBER_STYLE = "I"
PAGE_NUMBER_SIZE = 8.0
PAGE_NUMBER_Y_OFFSET = -15.0

# Tables
TABLE_WIDTH = 170.0
TABLE_LINE_HEIGHT = 6.0
TABLE_FONT_SIZE = 10.0
HEADER_FILL = (240, 240, 240)

# Images
IMAGE_WIDTH = 100.0
IMAGE_CAPTION_GAP = 5.0
CAPTION_FONT_SIZE = 10.0

# Table of contents
TOC_LINE_HEIGHT = 8.0

# Colours
BLACK = (0, 0, 0)
LINK_BLUE = (0, 0, 255)

# Elements preceded by one default line break
SPACED_ELEMENTS = frozenset({"h1", "h2", "h3", "p", "ul", "ol", "table", "blockquote"})
