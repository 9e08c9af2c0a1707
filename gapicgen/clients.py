"""Client-level code fragments and endpoint derivation helpers."""

from __future__ import annotations

GOOGLE_DEFAULT_UNIVERSE = "googleapis.com"
"""Domain of the default universe."""

UNIVERSE_DOMAIN_PLACEHOLDER = "UNIVERSE_DOMAIN"
"""Placeholder substituted for the universe domain in endpoint templates."""

# The sandbox domain must come first: the plain domain is a substring of it.
_MTLS_DOMAINS = (".sandbox.googleapis.com", ".googleapis.com")


def generate_default_endpoint_template(endpoint: str) -> str:
    """Replace the default universe domain with the universe placeholder.

    ``pubsub.googleapis.com`` becomes ``pubsub.UNIVERSE_DOMAIN``.
    """
    return endpoint.replace(GOOGLE_DEFAULT_UNIVERSE, UNIVERSE_DOMAIN_PLACEHOLDER, 1)


def generate_default_mtls_endpoint(endpoint: str) -> str:
    """Derive the mTLS variant of an endpoint, or return it unchanged.

    ``pubsub.googleapis.com`` becomes ``pubsub.mtls.googleapis.com`` and
    ``pubsub.sandbox.googleapis.com`` becomes
    ``pubsub.mtls.sandbox.googleapis.com``.
    """
    for domain in _MTLS_DOMAINS:
        if domain in endpoint:
            return endpoint.replace(domain, ".mtls" + domain)
    return endpoint


def generate_default_audience(host: str) -> str:
    """Turn a host into an audience usable as the ``aud`` claim of a JWT."""
    aud = host
    if "://" not in aud:
        aud = "https://" + aud
    # Drop the port and everything after it.
    if aud.count(":") > 1:
        first = aud.index(":")
        second = aud.index(":", first + 1)
        aud = aud[:second]
    if not aud.endswith("/"):
        aud += "/"
    return aud


def client_hook(service_name: str) -> str:
    """Go declaration of the client hook variable for a service."""
    return f"var new{service_name}ClientHook clientHook\n\n"


def _contains_deprecated(comment: str) -> bool:
    return any(
        line.strip().startswith("Deprecated:") for line in comment.splitlines()
    )


def _comment_lines(comment: str) -> str:
    out = []
    for line in comment.split("\n"):
        line = line.strip()
        out.append(f"// {line}\n" if line else "//\n")
    return "".join(out)


def service_doc(service_name: str, comment: str, deprecated: bool) -> str:
    """Go doc comment for a service client, with deprecation notices.

    Returns "" when there is no comment and the service is not deprecated.
    """
    if not comment and not deprecated:
        return ""

    if deprecated:
        if not comment:
            comment = (
                f"\n{service_name} is deprecated.\n\n"
                f"Deprecated: {service_name} may be removed in a future version."
            )
        elif comment.startswith("Deprecated:"):
            comment = f"\n{service_name} is deprecated.\n\n{comment}"
        elif not _contains_deprecated(comment):
            comment = (
                f"{comment}\n\n"
                f"Deprecated: {service_name} may be removed in a future version."
            )
    comment = comment.strip()

    return "//\n" + _comment_lines(comment)