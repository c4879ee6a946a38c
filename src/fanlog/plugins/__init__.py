"""
Pluggable components for fanlog.

Sinks live in ``fanlog.plugins.sinks``; a new sink type only needs to
implement the ``BaseSink`` protocol to be usable by a dispatch queue.
"""
