"""
Real-time media rooms (LiveKit): configuration and access tokens.
"""
