class UserNotAuthenticated(Exception):
    """The request carries no verified identity token."""


class UserEmailNotFound(Exception):
    """The token claims have no email to look the user up by."""


class UserNotFound(Exception):
    """The token is valid but its owner never registered."""


class UserAlreadyExists(Exception):
    """Registration for an email that already has an account."""
