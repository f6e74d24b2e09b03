"""
passport_vault: a PIN-locked vault with a serialized session gate.
"""

__version__ = "1.0.0"
