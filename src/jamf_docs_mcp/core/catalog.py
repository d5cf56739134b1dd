"""Static catalog of Jamf documentation products, topics and page selectors.

Jamf documentation lives on learn.jamf.com under
``/en-US/bundle/{product}-documentation/page/{page}.html``. The backend host
learn-be.jamf.com serves the same paths pre-rendered, plus the search and
table-of-contents APIs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class ResponseFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


class OutputMode(str, Enum):
    FULL = "full"
    COMPACT = "compact"


@dataclass(frozen=True)
class Product:
    """A Jamf product with published documentation."""

    id: str
    name: str
    description: str
    url_pattern: str
    bundle_id: str
    search_label: str
    latest_version: str = "current"
    versions: Tuple[str, ...] = ("current",)


@dataclass(frozen=True)
class Topic:
    """A curated topic used to filter search results by keyword."""

    id: str
    name: str
    keywords: Tuple[str, ...]


def _product(slug: str, name: str, description: str) -> Product:
    return Product(
        id=f"jamf-{slug}",
        name=name,
        description=description,
        url_pattern=f"en-US/bundle/jamf-{slug}-documentation/page",
        bundle_id=f"jamf-{slug}-documentation",
        search_label=f"product-{slug}",
    )


JAMF_PRODUCTS: Dict[str, Product] = {
    product.id: product
    for product in (
        _product("pro", "Jamf Pro", "Apple device management for enterprise"),
        _product("school", "Jamf School", "Apple device management for education"),
        _product("connect", "Jamf Connect", "Identity and access management"),
        _product("protect", "Jamf Protect", "Endpoint security for Apple"),
    )
}

_TOPIC_TABLE: List[Tuple[str, str, Tuple[str, ...]]] = [
    # Enrollment & onboarding
    ("enrollment", "Enrollment & Onboarding", (
        "enroll", "dep", "ade", "automated device enrollment", "user enrollment",
        "apple configurator", "onboard", "prestage", "enrollment method",
    )),
    # Device management
    ("computer-management", "Computer Management", (
        "computer management", "computer inventory", "remote command", "remote administration",
        "mass action", "unmanag", "check-in", "startup script", "login event",
    )),
    ("mobile-management", "Mobile Device Management", (
        "mobile device", "iphone", "ipad", "ios", "ipados", "mobile inventory", "mdm capabilities",
    )),
    # Configuration
    ("profiles", "Configuration Profiles", (
        "configuration profile", "profile", "payload", "restriction", "settings management",
        "computer configuration", "mobile configuration",
    )),
    ("policies", "Policies", (
        "policy", "policies", "execution frequency", "user interaction", "policy management",
        "policy payload", "trigger",
    )),
    # Software & packages
    ("packages", "Packages & Deployment", (
        "package", "pkg", "dmg", "package deployment", "package management", "installer",
    )),
    ("scripts", "Scripts", (
        "script", "bash", "shell", "login script", "startup script", "extension attribute",
    )),
    ("patch", "Patch Management", (
        "patch", "patch management", "patch policy", "software update", "patch reporting",
        "software title", "patch source",
    )),
    ("apps", "App Management", (
        "app", "application", "app installer", "vpp", "volume purchase", "managed app",
        "app store", "mac app store",
    )),
    ("self-service", "Self Service", (
        "self service", "self-service", "dock item", "branding", "bookmark", "user portal",
    )),
    # Security
    ("security", "Security Settings", (
        "security", "security settings", "restricted software", "efi password",
        "firmware password", "gatekeeper",
    )),
    ("filevault", "FileVault & Encryption", (
        "filevault", "encryption", "recovery key", "disk encryption", "institutional recovery",
        "personal recovery",
    )),
    ("compliance", "Compliance & Baseline", (
        "compliance", "baseline", "compliance baseline", "security benchmark", "cis benchmark", "gdpr",
    )),
    # Endpoint protection
    ("protect-analytics", "Threat Analytics", (
        "analytic", "threat", "detection", "analytic chain", "custom analytic",
        "jamf-managed analytic", "alert",
    )),
    ("protect-plans", "Protect Plans", (
        "protect plan", "jamf protect plan", "threat prevention", "endpoint security",
    )),
    ("data-integration", "SIEM & Data Integration", (
        "siem", "splunk", "sentinel", "elastic", "datadog", "sumo logic", "google secops",
        "amazon s3", "data stream", "data integration",
    )),
    # Identity & authentication
    ("sso", "Single Sign-On", (
        "sso", "single sign-on", "saml", "oidc", "oauth", "jamf account", "platform sso",
    )),
    ("ldap", "Directory Services", (
        "ldap", "active directory", "directory binding", "open directory", "google secure ldap",
    )),
    ("identity-provider", "Identity Providers", (
        "identity provider", "idp", "okta", "azure ad", "entra id", "microsoft entra", "google",
        "cloud identity",
    )),
    # Jamf Connect
    ("connect-login", "Jamf Connect Login", (
        "jamf connect", "login window", "local account", "account creation", "account migration",
        "mobile account",
    )),
    ("connect-password", "Password & Keychain", (
        "password sync", "keychain", "password policy", "local password",
    )),
    ("privilege-elevation", "Privilege Elevation", (
        "privilege elevation", "admin rights", "sudo", "privilege", "self service+",
    )),
    # Users & accounts
    ("users", "Users & Accounts", (
        "user account", "local account", "managed local administrator", "mdm-enabled",
        "user group", "admin account",
    )),
    ("user-roles", "Roles & Permissions", (
        "user role", "permission", "privilege", "administrator role", "api role", "access level",
    )),
    # Inventory & reporting
    ("inventory", "Inventory", (
        "inventory", "inventory collection", "inventory display", "hardware inventory",
        "software inventory", "inventory preload",
    )),
    ("extension-attributes", "Extension Attributes", (
        "extension attribute", "custom attribute", "ea", "custom field", "inventory attribute",
    )),
    ("reports", "Reports & Searches", (
        "report", "search", "advanced search", "simple search", "smart group", "criteria",
        "computer report",
    )),
    ("history", "History & Logs", (
        "history", "log", "audit", "audit log", "computer history", "management history", "server log",
    )),
    # API & integration
    ("api", "API & Automation", (
        "api", "rest api", "classic api", "jamf pro api", "api role", "api client", "bearer token",
    )),
    ("graphql", "GraphQL API", (
        "graphql", "query", "mutation", "schema", "protect api",
    )),
    ("webhooks", "Webhooks & Notifications", (
        "webhook", "notification", "email notification", "impact alert", "event",
    )),
    # Network & printing
    ("network", "Network Configuration", (
        "wifi", "vpn", "network", "proxy", "firewall", "port", "ip address", "url",
    )),
    ("certificates", "Certificates", (
        "certificate", "ssl", "scep", "push certificate", "apns", "signing",
    )),
    ("printers", "Printers", (
        "printer", "print", "cups", "ppd",
    )),
    ("remote-access", "Remote Access", (
        "remote assist", "jamf remote", "teamviewer", "screen sharing", "vnc", "remote administration",
    )),
    # Server administration
    ("server-admin", "Server Administration", (
        "server", "jamf pro server", "activation code", "smtp", "ssl certificate", "maintenance",
        "health check", "clustering",
    )),
    ("change-management", "Change Management", (
        "change management", "change log", "version", "backup", "restore",
    )),
    ("licensing", "License Management", (
        "license", "licensed software", "license compliance", "license usage", "vpp token",
    )),
    # Education
    ("education", "Education & Classroom", (
        "school", "class", "teacher", "student", "jamf teacher", "jamf student", "jamf parent",
        "classroom", "education",
    )),
    ("school-integration", "School Integrations", (
        "apple school manager", "asm", "shared ipad", "location", "google classroom",
    )),
]

JAMF_TOPICS: Dict[str, Topic] = {
    topic_id: Topic(id=topic_id, name=name, keywords=keywords)
    for topic_id, name, keywords in _TOPIC_TABLE
}


class Selectors:
    """CSS selectors for learn.jamf.com article pages."""

    CONTENT = "article, .article-content, main article, #content"
    TITLE = "h1"
    BREADCRUMB = '[class*="breadcrumb"] a, nav[aria-label="breadcrumb"] a'
    TOC = 'nav.related-links a, [class*="toc"] a, [class*="sidebar"] a'
    RELATED = 'nav.related-links a, .related-topics a, [class*="related"] a'
    REMOVE = (
        'script, style, noscript, footer, [id="initial-data"], '
        '[class*="cookie"], [class*="tracking"], [class*="analytics"]'
    )


def get_product(product_id: str) -> Product:
    """Look up a product by id.

    Raises:
        InvalidProductError: If ``product_id`` is not in the catalog
    """
    try:
        return JAMF_PRODUCTS[product_id]
    except KeyError:
        from jamf_docs_mcp.core.errors import InvalidProductError

        raise InvalidProductError(product_id, list(JAMF_PRODUCTS)) from None


def topic_matches(topic_id: str, text: str) -> bool:
    """True when any keyword of the topic occurs in ``text`` (case-insensitive)."""
    haystack = text.lower()
    return any(keyword.lower() in haystack for keyword in JAMF_TOPICS[topic_id].keywords)
