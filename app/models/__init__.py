# Carrega módulos para registrar tabelas no metadata:
from app.models.user import User, UserRole            # noqa: F401
from app.models.event import Event, users_events      # noqa: F401
from app.models.participant import Participant        # noqa: F401
from app.models.check_in_log import CheckInLog        # noqa: F401

__all__ = ["User", "UserRole", "Event", "users_events", "Participant", "CheckInLog"]
