"""
Shared utilities: text tokenization and request rate limiting.
"""
