"""Endpoints manager"""

from .fetch_user_info import (
    FetchUserInfoView as FetchUserInfoView,
    IDENTITY_FLOW as IDENTITY_FLOW,
    PATH as FETCH_USER_INFO_PATH,
)
from .welcome import WelcomeView as WelcomeView, PATH as WELCOME_PATH
