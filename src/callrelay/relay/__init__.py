"""
Webhook relay: request handlers, SMS reply rules and HTTP routes.
"""
