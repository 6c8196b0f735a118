"""
Default configuration for support interval computation.

Values mirror the defaults of the Savage-Dickey support interval
procedure: a 256-point grid extended by 5% on each side, and a
robust range of 7 MADs around the pooled median.
"""

DEFAULT_CONFIG = {
    "BF": 1.0,                # Support threshold
    "extend_scale": 0.05,     # Fraction of the range added on each side
    "precision": 2**8,        # Number of grid points
    "mad_width": 7.0,         # Half-width of the robust range, in MADs
    "bw_method": None,        # Bandwidth rule passed to gaussian_kde
}

# Reduced grid for quick checks
FAST_CONFIG = {
    **DEFAULT_CONFIG,
    "precision": 2**6,
}
