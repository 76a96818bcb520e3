"""
Service provider base class.

A service provider is a descriptor: it performs no I/O and holds no
per-request state. It tells the OAuth2 client which endpoints to call and
which parameters an authorization or token request accepts. Subclasses
extend the base parameter lists declared here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Mapping

AUTHORIZATION = "authorization"
REQUEST_TOKENS = "request_tokens"


@dataclass(frozen=True)
class ActionContext:
    """Values resolved once for a single action of the flow.

    A new context is created for every call to ``begin_action`` and handed
    to the endpoint functions. Providers that need per-action values
    subclass it.
    """

    action: str


def unique(names: Iterable[str], exclude: Iterable[str] = ()) -> tuple[str, ...]:
    """Return names in order with duplicates and excluded names removed."""
    seen = set(exclude)
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return tuple(result)


class ServiceProvider(ABC):
    """Base class for OAuth2 service provider descriptors.

    Subclasses must set ``name`` and implement the two endpoint functions.
    The parameter hooks return the generic lists; subclasses prepend their
    own names and call ``super()`` to keep these.
    """

    name: ClassVar[str] = ""

    def begin_action(
        self,
        action: str,
        init_values: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> ActionContext:
        """Resolve the values an action needs before endpoints are looked up.

        Args:
            action: The action being performed (authorization or request_tokens).
            init_values: Values the client was constructed with.
            options: Per-call options passed by the caller.

        Returns:
            A fresh context for this action only.
        """
        return ActionContext(action=action)

    @abstractmethod
    def authorization_endpoint(self, context: ActionContext) -> str:
        """Return the URL the user agent is sent to for login and consent."""

    @abstractmethod
    def token_endpoint(self, context: ActionContext) -> str:
        """Return the URL the authorization code is exchanged at."""

    # Construction-time fields

    def required_init_fields(self) -> tuple[str, ...]:
        return ("client_id", "client_secret", "redirect_uri")

    def optional_init_fields(self) -> tuple[str, ...]:
        return ("scope", "state")

    # Authorization request

    def authorization_required_params(self) -> tuple[str, ...]:
        return ("response_type", "client_id")

    def authorization_optional_params(self) -> tuple[str, ...]:
        return ("redirect_uri", "state", "scope")

    def authorization_default_params(self) -> dict[str, str]:
        return {"response_type": "code"}

    # Token request

    def request_required_params(self) -> tuple[str, ...]:
        return ("grant_type", "client_id", "client_secret", "code")

    def request_optional_params(self) -> tuple[str, ...]:
        return ("redirect_uri", "state")

    def request_default_params(self) -> dict[str, str]:
        return {"grant_type": "authorization_code"}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
