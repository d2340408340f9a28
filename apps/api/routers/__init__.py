"""Routers package."""

from . import (
    health,
    links,
    collections,
    public,
    users,
    tags,
    echo,
)
