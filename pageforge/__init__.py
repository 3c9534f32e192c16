"""PageForge - the document, command and event engine of a visual page builder.

Quick Start:
    from pageforge import EventBinding, PageBuilder

    builder = PageBuilder()
    box = builder.add_component("container")
    button = builder.add_component("button", parent_id=box)
    builder.update_component_events(
        button,
        [EventBinding(event_type="onClick", action="hide", target_component=box)],
    )
    builder.fire_event("onClick", button)   # box is now hidden
    builder.undo()                          # reverts the binding edit, not the hide

For config-driven usage:
    from pageforge import ConfigLoader, PageBuilder

    config = ConfigLoader.load_builder_config("builder.yaml")
    builder = PageBuilder.from_config(config)
"""

from .builder import PageBuilder
from .config_loader import BuilderConfig, ConfigLoader
from .context import EventContext
from .errors import (
    ConfigError,
    DocumentError,
    ImportError_,
    PageForgeError,
    RegistryError,
    SandboxError,
)
from .event_engine import DispatchReport, EventEngine
from .explain import Diagnostic, DocumentExplanation, explain
from .history import Command, CommandHistory
from .model import (
    ComponentInstance,
    CustomPayload,
    EmptyPayload,
    EventBinding,
    NavigatePayload,
    PageDocument,
    RawPayload,
    SetPropPayload,
    SubmitPayload,
    new_page,
)
from .registry import ComponentMeta, ComponentTypeRegistry, builtin_registry
from .tree import DropIntent
from .view_state import ViewState
from .visualize import visualize

__all__ = [
    # Core
    "PageBuilder",
    "EventEngine",
    "EventContext",
    "DispatchReport",
    "CommandHistory",
    "Command",
    "ViewState",
    "DropIntent",
    # Model
    "PageDocument",
    "ComponentInstance",
    "EventBinding",
    "SetPropPayload",
    "NavigatePayload",
    "SubmitPayload",
    "CustomPayload",
    "EmptyPayload",
    "RawPayload",
    "new_page",
    # Catalog
    "ComponentMeta",
    "ComponentTypeRegistry",
    "builtin_registry",
    # Config
    "ConfigLoader",
    "BuilderConfig",
    # Errors
    "PageForgeError",
    "ConfigError",
    "DocumentError",
    "RegistryError",
    "SandboxError",
    "ImportError_",
    # Introspection
    "explain",
    "DocumentExplanation",
    "Diagnostic",
    # Visualization
    "visualize",
]

# Internal modules available but not in __all__:
# - tree: structural operations used by PageBuilder
# - serialize: dict/JSON codec (load/export go through PageBuilder)
# - sandbox: custom action snippet compiler

__version__ = "0.1.0"
