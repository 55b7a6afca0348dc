"""Core domain package for redscope.

Core holds the subscription registry, per-topic delivery dedup, and dispatch
logic without any Telegram, feed, or storage-specific code, keeping the
business logic portable.
"""
