"""
Exception types raised by the Kickabout Teams services.

Validation and gate failures are raised before any store call, so the caller
can rely on state being unchanged whenever one of these propagates.
"""


class KickaboutError(Exception):
    """Base class for application errors."""
    pass


class RosterValidationError(KickaboutError):
    """Player data failed validation (empty name, rating out of range...)."""
    pass


class InvalidKeyError(KickaboutError):
    """The supplied roster key does not match the configured one."""
    pass


class MissingIdentityError(KickaboutError):
    """A mutating operation was attempted without a signed-in owner."""
    pass


class PlayerNotFoundError(KickaboutError):
    """No player with the requested id exists in the owner's roster."""
    pass


class StoreError(KickaboutError):
    """The backing store failed; the message is safe to show to the user."""
    pass


class GuidanceError(KickaboutError):
    """A request that cannot proceed yet; reported as guidance, not a failure."""
    pass


class NotEnoughPlayersError(GuidanceError):
    """Fewer than two attendees are available for team balancing."""
    pass


class TeamsNotReadyError(GuidanceError):
    """A coin toss was requested before teams were generated."""
    pass
