from courtpairing.controllers.session import SessionManager

__all__ = ["SessionManager"]
