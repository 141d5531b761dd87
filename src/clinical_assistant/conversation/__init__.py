from .loader import ConversationLoader, ConversationView, LoadState, Notification

__all__ = ["ConversationLoader", "ConversationView", "LoadState", "Notification"]
