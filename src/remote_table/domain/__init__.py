"""Domain layer for the remote table handler.

Pure protocol logic: value objects, frame entities, the error taxonomy,
and the wire codec plus the write and scan state machines built on it.
"""
