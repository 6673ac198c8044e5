from .form import DraftForm, RepositoryPanel
from .popups import PopupManager
from .status import StatusManager

__all__ = ["DraftForm", "RepositoryPanel", "PopupManager", "StatusManager"]
