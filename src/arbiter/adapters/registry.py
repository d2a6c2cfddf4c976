"""Adapter registry for resolving judge and embedder names to classes.

Supports both builtin adapter names (e.g., "openai", "anthropic")
and custom dotted-path imports (e.g., "my.module.MyJudge").
"""

from __future__ import annotations

import importlib
from typing import Any, TypeVar

from arbiter.adapters.base import BaseEmbedder, BaseJudge

# Mapping of builtin short names to fully-qualified class paths.
# These adapters are lazily imported -- the provider SDK must be installed.
BUILTIN_JUDGES: dict[str, str] = {
    "openai": "arbiter.adapters.openai_adapter.OpenAIJudge",
    "anthropic": "arbiter.adapters.anthropic_adapter.AnthropicJudge",
}

BUILTIN_EMBEDDERS: dict[str, str] = {
    "openai": "arbiter.adapters.openai_adapter.OpenAIEmbedder",
}

# Maps builtin names to their pip install extras for helpful error messages.
_INSTALL_HINTS: dict[str, str] = {
    "openai": "pip install arbiter-eval[openai]",
    "anthropic": "pip install arbiter-eval[anthropic]",
}

T = TypeVar("T")


def _resolve_class(
    name: str,
    builtins: dict[str, str],
    base: type[T],
    kind: str,
) -> type[T]:
    """Resolve a builtin name or dotted path to a subclass of *base*.

    Raises:
        ValueError: If the name is not a builtin and has no dots (unknown).
        ImportError: If the module cannot be imported (e.g., missing SDK).
        TypeError: If the resolved class is not a subclass of *base*.
    """
    # Resolve builtin name to dotted path
    if name in builtins:
        dotted_path = builtins[name]
    elif "." in name:
        dotted_path = name
    else:
        available = ", ".join(sorted(builtins.keys()))
        raise ValueError(
            f"Unknown {kind} '{name}'. "
            f"Available builtin {kind}s: {available}. "
            f"For custom {kind}s, provide the full dotted path "
            f"(e.g., 'my.module.MyClass')."
        )

    # Split dotted path into module path and class name
    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(
            f"Invalid {kind} path '{dotted_path}'. "
            f"Expected format: 'module.path.ClassName'."
        )

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        if name in _INSTALL_HINTS:
            raise ImportError(
                f"{kind.capitalize()} '{name}' requires the {name} package. "
                f"Install it: {_INSTALL_HINTS[name]}"
            ) from exc
        raise

    try:
        cls = getattr(module, class_name)
    except AttributeError:
        raise ImportError(
            f"Module '{module_path}' has no attribute '{class_name}'."
        ) from None

    if not isinstance(cls, type) or not issubclass(cls, base):
        raise TypeError(
            f"'{dotted_path}' is not a subclass of {base.__name__}. "
            f"Custom {kind}s must inherit from arbiter.adapters.base.{base.__name__}."
        )

    return cls


def get_judge(name: str, **kwargs: Any) -> BaseJudge:
    """Resolve a judge by builtin name or dotted path and instantiate it.

    Keyword arguments are passed to the judge constructor.
    """
    cls = _resolve_class(name, BUILTIN_JUDGES, BaseJudge, "judge")
    return cls(**kwargs)


def get_embedder(name: str, **kwargs: Any) -> BaseEmbedder:
    """Resolve an embedder by builtin name or dotted path and instantiate it.

    Keyword arguments are passed to the embedder constructor.
    """
    cls = _resolve_class(name, BUILTIN_EMBEDDERS, BaseEmbedder, "embedder")
    return cls(**kwargs)
