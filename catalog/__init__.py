"""
Products catalog: a small REST API over a DynamoDB table.
"""

__version__ = '0.1.0'
