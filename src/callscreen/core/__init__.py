"""Core domain package for callscreen.

Core contains number normalization, rule matching, settings and the screening
policy without any storage or platform-specific code, keeping the decision
logic portable.
"""
