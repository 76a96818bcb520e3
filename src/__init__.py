"""
Entra OAuth2 Provider - Azure AD service provider for the OAuth2 authorization-code flow.

Supplies the Azure AD (Entra ID) endpoints and parameter sets to a small
generic OAuth2 client, with the tenant resolved per action so one process
can serve several tenants.
"""

__version__ = "0.1.0"
