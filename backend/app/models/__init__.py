"""SQLModel database models."""

from app.models.project import (
    Project,
    ProjectStatus,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)
from app.models.text_block import (
    TextBlock,
    ChangeStatus,
    BlockSnapshot,
    TextBlockChange,
    TextBlockRead,
    ALLOWED_TRANSITIONS,
)
from app.models.frame import Frame, FrameRead, ComponentInfo
from app.models.setting import AppSetting

__all__ = [
    # Project
    "Project",
    "ProjectStatus",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    # Text block
    "TextBlock",
    "ChangeStatus",
    "BlockSnapshot",
    "TextBlockChange",
    "TextBlockRead",
    "ALLOWED_TRANSITIONS",
    # Frame
    "Frame",
    "FrameRead",
    "ComponentInfo",
    # Settings
    "AppSetting",
]
