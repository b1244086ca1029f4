from .core import (
    collect_files,
    create_markdown_document,
    markdown_to_files,
    pick_fence,
    render_tree,
    write_catalog,
)

__version__ = "0.1.0"
__all__ = [
    "collect_files",
    "create_markdown_document",
    "markdown_to_files",
    "pick_fence",
    "render_tree",
    "write_catalog",
]

try:
    from .demo import run_demo  # Optional import for demo
    __all__.append("run_demo")
except ImportError:
    pass  # Demo not available if Flask/markdown not installed
