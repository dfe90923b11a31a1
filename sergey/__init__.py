from .compiler import Compiler
from .errors import ConfigError, CssSyntaxError, SergeyError, TemplateDepthError
from .fragments import FragmentStore, key_for
from .links import activate_links
from .rewriter import rewrite
from .scope import ScopeContext, scope_styles
from .slots import extract_slots

__version__ = "0.1.0"
