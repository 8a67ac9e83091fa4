"""
CommentLens
Credit-metered YouTube comment analysis service
"""

__version__ = "0.1.0"
