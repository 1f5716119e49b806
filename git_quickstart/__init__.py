"""Git Quickstart - bootstrap a workstation for private GitHub repositories."""

try:
    from git_quickstart._version import version as __version__
except ImportError:
    __version__ = "0.0.0.dev0"
