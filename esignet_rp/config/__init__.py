"""Imports manager"""

from .const import *  # noqa: F403
from .settings import (
    IdentitySettings as IdentitySettings,
    load_settings as load_settings,
)
