"""Planner error taxonomy.

Backend failures are category-scoped and live with the client
(`AirtableError`); the classes here abort the whole request.
"""


class PlannerError(Exception):
    """Base class for request-level planner failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(PlannerError):
    """The request is missing required locality fields."""

    status_code = 400


class ConfigurationError(PlannerError):
    """Backend credentials are not configured on the server."""

    status_code = 500
