"""
client-manager — a small client/phone book on top of a relational database.

    from client_manager.store import ClientStore

See client_manager.demo for the scripted walkthrough.
"""

__version__ = "0.1.0"
