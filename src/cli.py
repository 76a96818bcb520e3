"""
Command-line login with Azure AD.

Prints the authorization URL, waits for the URL the browser was redirected
to, and exchanges the code it contains for tokens. No web server is needed:
register a native-client redirect URI with the app, e.g.
https://login.microsoftonline.com/common/oauth2/nativeclient

Usage:
    python cli.py
    python cli.py --tenant contoso.onmicrosoft.com --prompt login
"""

import argparse
import asyncio
import json
import logging
import secrets
import sys
from typing import Any, Optional, Sequence

from auth.client import OAuth2Client
from config.settings import get_oauth2_config
from core.exceptions import OAuth2ClientError
from utils.auth_utils import extract_code_from_url, summarize_token_response


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Azure AD command-line login")
    parser.add_argument("--tenant", help="Tenant to log in to (overrides TENANT)")
    parser.add_argument("--prompt", help="Prompt behaviour, e.g. 'login'")
    parser.add_argument("--scope", help="Space-separated scopes to request")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command-line login.

    Returns:
        Process exit status.
    """
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    options: dict[str, Any] = {}
    if args.tenant:
        options["tenant"] = args.tenant
    if args.prompt:
        options["prompt"] = args.prompt
    if args.scope:
        options["scope"] = args.scope

    try:
        client = OAuth2Client(config=get_oauth2_config())

        print("1. Copy and paste this URL into a web browser.")
        state = secrets.token_urlsafe(32)
        print(client.authorization_url(state=state, **options))
        print()
        print("2. Once you've logged in, copy and paste the URL from your web browser back here.")
        url = input("Enter URL returned: ")

        code = extract_code_from_url(url, expected_state=state)
        tokens = asyncio.run(client.request_tokens(code, **options))
    except (OAuth2ClientError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(summarize_token_response(tokens), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
