"""Business-rule failures raised by the core and rendered by the API layer.

Every error carries the HTTP status it surfaces with and optional extra
fields that are merged into the ``{"success": false, "message": ...}`` body.
"""


class AppError(Exception):
    status = 400

    def __init__(self, message, status=None, **extra):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.extra = extra


class ValidationError(AppError):
    status = 400


class NotFound(AppError):
    status = 404


class AuctionClosed(AppError):
    status = 400


class SelfBidForbidden(AppError):
    status = 400


class InsufficientFunds(AppError):
    status = 400


class DirectionLocked(AppError):
    status = 400

    def __init__(self, locked_to):
        super().__init__(
            f"You are locked to {locked_to} bidding for this vehicle",
            lockedTo=locked_to,
        )
        self.locked_to = locked_to


class InvalidBidAmount(AppError):
    status = 400

    def __init__(self, reason, rule):
        super().__init__(reason, rule=rule)
        self.rule = rule


class StalePrice(AppError):
    """Another bid on the same vehicle (or debit on the same wallet) won the race."""
    status = 409


class Unauthorized(AppError):
    status = 401


class Forbidden(AppError):
    status = 403
