"""Protocol constants shared by the embedder and the parser."""

# Reserved literals delimiting the embedded manifest block. Both sides must
# agree on these byte-for-byte.
MANIFEST_START_MARKER = "%%APDF_MANIFEST_START%%"
MANIFEST_END_MARKER = "%%APDF_MANIFEST_END%%"

# Page boxes narrower or shorter than this (in points) are not real pages;
# the manifest carrier page is 1 x 1.
MIN_VISIBLE_PAGE_EXTENT = 10.0

CARRIER_PAGE_EXTENT = 1.0
CARRIER_FONT_SIZE = 0.001

# Prefix of the /NM entry on annotations written for generic viewers.
ANNOTATION_NAME_PREFIX = "apdf:"

DEFAULT_PRODUCER = "PDF Hotspots"
