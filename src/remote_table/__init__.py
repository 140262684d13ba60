"""
Remote Table - pluggable table-access handler backed by a remote row store

Turns the host engine's "insert one row" and "scan all rows" calls into
request/reply exchanges with a single configured remote peer over TCP.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
