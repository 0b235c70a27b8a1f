"""Publisher — multi-role publishing platform backend.

Authors publish literary works, translators pick up translation
requests, editors review. This package is the REST API: accounts,
sessions, works, and translations.
"""

__version__ = "1.0.0"
