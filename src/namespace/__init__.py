"""Generator/action namespace discovered from template roots."""

from scaffoldkit.namespace.loader import (
    ActionConflictError,
    GeneratorManifestError,
    available_actions,
    load_generators,
)
from scaffoldkit.namespace.models import Action, ConflictStrategy, Generator, TemplateRoot
from scaffoldkit.namespace.template_store import ActionStore, GeneratorStore, TemplateStore

__all__ = [
    "Action",
    "ActionConflictError",
    "ActionStore",
    "ConflictStrategy",
    "Generator",
    "GeneratorManifestError",
    "GeneratorStore",
    "TemplateRoot",
    "TemplateStore",
    "available_actions",
    "load_generators",
]
