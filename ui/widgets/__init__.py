from .delete_confirm import DeleteConversationDialog
from .refactor_dialog import RefactorDialog

__all__ = [
    "DeleteConversationDialog",
    "RefactorDialog",
]
