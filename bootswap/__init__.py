"""
bootswap: constant-product AMM core with crowdfunded pair bootstrapping.
"""

__version__ = "0.1.0"
