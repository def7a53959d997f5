"""
Outline and task engine for plain-text org journals.

Every function here works on a snapshot of the document's lines and returns
new values; nothing is cached between calls and the caller's list is never
modified.
"""

__version__ = "0.1.0"
