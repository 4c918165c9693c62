"""
Conventional Commit signals.

Deterministic diff analysis, history correlation and tone validation that
help a human or an LLM write Conventional Commit messages.
"""

__version__ = "0.2.0"
