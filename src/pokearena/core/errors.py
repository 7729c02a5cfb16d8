"""Arena error taxonomy.

Every failure surfaced by the core is one of these. The web layer decides
presentation; the core only raises.
"""


class ArenaError(Exception):
    """Base class for arena errors."""


class ValidationError(ArenaError):
    """One or more preconditions failed.

    ``errors`` keeps every violated precondition in the order it was checked,
    so callers can show the most relevant (first) one.
    """

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(self.errors[0] if self.errors else "Validation failed")


class DuplicateChallengeError(ValidationError):
    """A pending challenge already exists between the two users."""


class NotFoundError(ArenaError):
    """Unknown id, or the caller is not a party to it."""


class InvalidChallengeError(NotFoundError):
    """Challenge does not exist or is not addressed to the caller."""


class BattleNotFoundError(NotFoundError):
    """No staged battle data for the requested id."""


class StateConflictError(ArenaError):
    """Action attempted against a challenge in the wrong state."""


class ChallengeExpiredError(StateConflictError):
    """Challenge is no longer pending."""


class UpstreamFetchError(ArenaError):
    """The external Pokemon data source failed."""


class MalformedDataError(ArenaError):
    """Data does not have the expected shape."""


class MalformedPokemonDataError(MalformedDataError):
    """Pokemon snapshot is missing fields or has fewer than six stats."""
