# Sidebarctl Bookmark Module
# Bookmark data resolution and creation on top of mac_alias

from mac_alias.bookmark import Bookmark

from sidebarctl.bookmark.resolver import create, parse, resolve

__all__ = [
    "Bookmark",
    "create",
    "parse",
    "resolve",
]
