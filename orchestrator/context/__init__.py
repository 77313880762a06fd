from .builder import BOOTSTRAP_FILES, ContextBuilder, ContextConfig, WorkspaceContextBuilder

__all__ = ["BOOTSTRAP_FILES", "ContextBuilder", "ContextConfig", "WorkspaceContextBuilder"]
