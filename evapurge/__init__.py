"""
evapurge
========

Remove unused rules from a compiled EVA CSS stylesheet.

    from evapurge import CSSPurger, PurgeConfig
    CSSPurger(PurgeConfig(css="dist/eva.css", content=["src/**/*.html"])).purge()
"""

__version__ = "0.1.0"

from evapurge.config.models import PurgeConfig  # noqa: E402
from evapurge.errors import ConfigError, CSSNotFoundError, PurgeError  # noqa: E402
from evapurge.purger import CSSPurger, purge  # noqa: E402

__all__ = [
    "CSSNotFoundError",
    "CSSPurger",
    "ConfigError",
    "PurgeConfig",
    "PurgeError",
    "purge",
]
