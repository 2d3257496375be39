"""Host context for interactive (browser-like) environments"""

from dataclasses import dataclass, field
from typing import Callable, MutableMapping, Optional


@dataclass
class HostContext:
    """Ambient page state the auth manager may use when it is available

    Attributes:
        current_url: URL the user was redirected to (used as the default
            callback input)
        attempt_storage: Storage scoped to one authorization attempt,
            holds the PKCE verifier between redirect and callback
        replace_url: Called with the cleaned URL once the authorization
            code has been consumed, to hide it from the visible address
    """
    current_url: Optional[str] = None
    attempt_storage: MutableMapping[str, str] = field(default_factory=dict)
    replace_url: Optional[Callable[[str], None]] = None
