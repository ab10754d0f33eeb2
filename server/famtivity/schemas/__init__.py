"""Pydantic schemas for request/response validation."""

from .activity import *  # noqa: F403
from .auth import *  # noqa: F403
from .booking import *  # noqa: F403
from .common import *  # noqa: F403
from .dashboard import *  # noqa: F403
from .feedback import *  # noqa: F403
from .onboarding import *  # noqa: F403
from .waitlist import *  # noqa: F403
