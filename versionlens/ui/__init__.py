from versionlens.ui.badges import Badge, BadgeStyle, filter_badges_by_style
from versionlens.ui.decorations import DecorationManager

__all__ = ["Badge", "BadgeStyle", "DecorationManager", "filter_badges_by_style"]
