"""
Render a git repository as a static website: a commit log, one page per
commit with its diff, and a browsable, syntax-highlighted file tree.
"""

from .errors import (
    InvalidTextError,
    ObjectReadError,
    PathCollisionError,
    RepositoryOpenError,
    SiteError,
    SiteIOError,
)
from .generator import GenerationSummary, SiteGenerator, SiteOptions
from .git import Repository
from .urls import SitePath

__version__ = "0.1.0"
