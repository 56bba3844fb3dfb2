"""
AI Painter

Text-to-image gateway for Cloudflare Workers AI with optional image host relay.
"""
__version__ = "1.0.0"
