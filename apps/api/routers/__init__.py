"""Routers package."""

from . import (
    health,
    youtube,
    writer,
    scripts,
    styles,
    trends,
    profile,
    automations,
    chat,
    ux,
)
