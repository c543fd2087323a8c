"""
Call relay: telephony webhooks, outbound SMS/calls and LiveKit room tokens.
"""

__version__ = "0.1.0"
