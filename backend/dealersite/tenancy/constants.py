"""
Constants for tenancy concerns.
"""

# Header carrying an explicit dealer selection (admin previews, internal calls).
DEALER_HEADER = "X-Dealer-ID"

# Header carrying the original request path when the host is behind a rewrite.
PATHNAME_HEADER = "X-Pathname"
