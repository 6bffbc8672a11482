"""
decomposer - break one work item into a typed tree of draft children.
"""

__version__ = "0.1.0"
