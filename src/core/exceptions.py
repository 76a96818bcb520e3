"""
Custom exception hierarchy for the OAuth2 client.

Provides explicit failure modes instead of silent failures and generic exceptions.
This improves debuggability and allows callers to handle specific error types.
"""


class OAuth2ClientError(Exception):
    """
    Base exception for all OAuth2 client errors.

    All custom exceptions in the package should inherit from this class
    to allow catching all OAuth2-related errors with a single except clause.
    """

    pass


class ConfigurationError(OAuth2ClientError):
    """
    Configuration validation failed.

    Raised when required configuration values are missing or invalid.
    Examples:
    - Missing TENANT when the Microsoft provider is selected
    - Missing CLIENT_ID or CLIENT_SECRET
    - Missing REDIRECT_URI
    """

    pass


class MissingEndpointError(ConfigurationError):
    """
    A provider endpoint resolved to an empty URL.

    Providers return an empty endpoint instead of raising when the values
    they are templated from (e.g. the tenant) are unset. The client raises
    this error at the moment it needs to use the endpoint.
    """

    pass


class MissingParameterError(OAuth2ClientError):
    """
    A parameter required by the provider was not supplied.

    Raised while assembling authorization or token request parameters.
    """

    pass


class ProviderNotFoundError(OAuth2ClientError):
    """
    No service provider is registered under the requested name.
    """

    pass


class TokenRequestError(OAuth2ClientError):
    """
    Token request failed.

    Raised when the token endpoint returns an error response or cannot
    be reached. The OAuth2 ``error`` code and description are kept when
    the provider returned them.
    """

    def __init__(
        self,
        message: str,
        error: str | None = None,
        error_description: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.error_description = error_description
        self.status = status


class AuthorizationDeniedError(OAuth2ClientError):
    """
    The authorization redirect carried an error instead of a code.

    Examples:
    - User cancelled the login (access_denied)
    - Consent required (AADSTS65001)
    """

    def __init__(self, error: str, error_description: str | None = None) -> None:
        message = error if not error_description else f"{error}: {error_description}"
        super().__init__(message)
        self.error = error
        self.error_description = error_description


class StateMismatchError(OAuth2ClientError):
    """
    The redirect's ``state`` does not match the login that was started.

    The code is not exchanged: the redirect may belong to another login
    or have been forged.
    """

    pass
