"""
paid_access - pricing, promo codes and hosted-checkout orchestration
for time-limited access to paid content.
"""

__version__ = "0.1.0"
