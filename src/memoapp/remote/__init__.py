"""Remote store backends.

The core only talks to the RemoteStore protocol in ``base``; ``http`` is the
REST implementation used in production.
"""
