from loguru import logger

from app.models.schemas import ParsedEntry, Session


class SessionStore:
    """In-memory sessions, one per user.

    Nothing expires: a session the user abandons stays here until they send
    new text or the process restarts.
    """

    def __init__(self):
        self._sessions: dict[int, Session] = {}

    def create(self, user_id: int, entry: ParsedEntry) -> Session:
        if user_id in self._sessions:
            logger.info("Replacing unfinished session of user {}", user_id)
        session = Session.from_entry(user_id, entry)
        self._sessions[user_id] = session
        return session

    def get(self, user_id: int) -> Session | None:
        return self._sessions.get(user_id)

    def pop(self, user_id: int) -> Session | None:
        return self._sessions.pop(user_id, None)

    def discard(self, session: Session) -> bool:
        """Remove this exact session; a newer one for the same user stays."""
        if self._sessions.get(session.user_id) is not session:
            return False
        del self._sessions[session.user_id]
        return True

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
