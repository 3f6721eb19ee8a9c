"""Screen regions as state machines.

Why a package:
- One module per region (header, sidebar, content, footer, modal) plus the
  field-cycling editor used by the content region.
- Each module exposes a closed set of action dataclasses; the router is the
  only consumer of those actions.
"""

from core.components.content import Content
from core.components.footer import Footer
from core.components.header import Header
from core.components.modal import RequestModal
from core.components.sidebar import Sidebar

__all__ = [
	"Content",
	"Footer",
	"Header",
	"RequestModal",
	"Sidebar",
]
