"""Configuration package for jamf-docs-mcp.

Sub-modules:
    parsing    - Boolean, integer and millisecond parsing helpers
    domains    - TokenSettings, PaginationSettings, RequestSettings, CacheSettings
    server     - ServerConfig dataclass, get_config/set_config globals
    loader     - ServerConfig loading mixin (_ServerConfigLoader)
"""

from jamf_docs_mcp.config.domains import (  # noqa: F401
    DEFAULT_USER_AGENT,
    CacheSettings,
    PaginationSettings,
    RequestSettings,
    TokenSettings,
)
from jamf_docs_mcp.config.parsing import _parse_bool  # noqa: F401
from jamf_docs_mcp.config.server import (  # noqa: F401
    _PACKAGE_VERSION,
    ServerConfig,
    get_config,
    set_config,
)
