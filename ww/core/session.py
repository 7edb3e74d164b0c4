from dataclasses import dataclass
from ww.common.logger import log
from ww.core.access import Role


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str = ""
    # Kept as the stored string, so a profile with an unknown role still signs in (it just can't see anything)
    role: str = Role.FIELD_WORKER.value

    @staticmethod
    def from_profile(profile: dict):
        return User(
            id=str(profile.get("id", "")),
            name=profile.get("name") or profile.get("naam") or "",
            email=profile.get("email", ""),
            role=str(profile.get("role", Role.FIELD_WORKER.value)),
        )


# Holds whoever is signed in. Authentication itself happens elsewhere; this only answers "who, and in what role".
class Session:

    def __init__(self, user: User | None = None):
        self._user = None
        self._role = None
        if user is not None:
            self._adopt(user)

    def current_user(self):
        return self._user

    def current_role(self):
        return self._role

    def sign_in(self, user: User):
        self._adopt(user)
        log.info(f"Signed in as '{user.name}' ({user.role})")

    def sign_out(self):
        if self._user is not None:
            log.info(f"Signed out '{self._user.name}'")
        self._user = None
        self._role = None

    # Role is resolved once per sign in, so an unknown one is only reported once.
    def _adopt(self, user: User):
        self._user = user
        self._role = Role.parse(user.role)
        if self._role is None:
            log.warning(f"User '{user.id}' has unknown role '{user.role}', treating as no access.")
