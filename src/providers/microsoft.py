"""
Microsoft Azure AD (Entra ID) service provider.

Endpoints are templated on the tenant (directory) ID:
https://login.microsoftonline.com/<tenant>/oauth2/authorize

The tenant is resolved once per action, from the ``tenant`` call option if
given or else from the client configuration, and carried in a
MicrosoftActionContext. Nothing is kept on the provider between calls, so
one process can authenticate against several tenants at once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .base import ActionContext, ServiceProvider, unique

logger = logging.getLogger(__name__)

LOGIN_HOST = "https://login.microsoftonline.com"


@dataclass(frozen=True)
class MicrosoftActionContext(ActionContext):
    """Action context carrying the tenant resolved for this action."""

    tenant: str = ""


class MicrosoftProvider(ServiceProvider):
    """Azure AD "Application" OAuth2 provider.

    Requires a ``tenant`` at construction in addition to the generic
    client ID, secret and redirect URI. Supports the ``prompt`` parameter,
    e.g. ``prompt="login"`` to force the login screen even when the user
    already has a session.
    """

    name = "Microsoft"

    def resolve_tenant(
        self, init_values: Mapping[str, Any], options: Mapping[str, Any]
    ) -> str:
        """Return the tenant for one action.

        An explicit ``tenant`` option wins over the configured tenant,
        even when it is empty.
        """
        if "tenant" in options:
            tenant = options["tenant"]
        else:
            tenant = init_values.get("tenant")
        return tenant or ""

    def begin_action(
        self,
        action: str,
        init_values: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> MicrosoftActionContext:
        tenant = self.resolve_tenant(init_values, options)
        if not tenant:
            logger.warning(f"No tenant configured for {action}; endpoints will be empty")
        return MicrosoftActionContext(action=action, tenant=tenant)

    def authorization_endpoint(self, context: ActionContext) -> str:
        tenant = getattr(context, "tenant", "")
        if not tenant:
            return ""
        return f"{LOGIN_HOST}/{tenant}/oauth2/authorize"

    def token_endpoint(self, context: ActionContext) -> str:
        tenant = getattr(context, "tenant", "")
        if not tenant:
            return ""
        return f"{LOGIN_HOST}/{tenant}/oauth2/token"

    def required_init_fields(self) -> tuple[str, ...]:
        return unique(("tenant", *super().required_init_fields()))

    def optional_init_fields(self) -> tuple[str, ...]:
        return unique(
            ("prompt", *super().optional_init_fields()),
            exclude=self.required_init_fields(),
        )

    def authorization_required_params(self) -> tuple[str, ...]:
        return unique(
            (
                "client_id",
                "redirect_uri",
                "response_mode",
                "response_type",
                "scope",
                *super().authorization_required_params(),
            )
        )

    def authorization_optional_params(self) -> tuple[str, ...]:
        return unique(
            ("prompt", *super().authorization_optional_params()),
            exclude=self.authorization_required_params(),
        )

    def authorization_default_params(self) -> dict[str, str]:
        defaults = {
            "scope": "User.Read",
            "response_mode": "query",
            "response_type": "code",
        }
        for key, value in super().authorization_default_params().items():
            defaults.setdefault(key, value)
        return defaults
