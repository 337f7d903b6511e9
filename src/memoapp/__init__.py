"""Memo client core: login, category/memo navigation and memo CRUD.

The core emits immutable snapshots to pluggable views; all remote access goes
through the RemoteStore protocol.
"""
