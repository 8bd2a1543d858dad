"""
Centralized Rust type string utilities.

Types reach the analyzer as strings rendered by the front-end with fully
qualified paths. These helpers are used for:
- Stripping reference modifiers (&, &mut, &'a)
- Stripping generic arguments (<'info, T>)
- Extracting the ADT path a type names
"""

from typing import Optional


def strip_reference(type_str: str) -> str:
    """
    Strip one reference layer from a type string.

    Examples:
        "&mut Pool" -> "Pool"
        "&'info AccountInfo<'info>" -> "AccountInfo<'info>"
        "Pool" -> "Pool"
    """
    result = type_str.strip()
    if not result.startswith("&"):
        return result
    result = result[1:].lstrip()
    if result.startswith("'"):
        # lifetime: &'a T
        parts = result.split(None, 1)
        result = parts[1] if len(parts) == 2 else ""
    if result.startswith("mut "):
        result = result[4:]
    return result.strip()


def strip_references(type_str: str) -> str:
    """
    Strip all reference layers.

    Examples:
        "&&mut Pool" -> "Pool"
    """
    result = type_str.strip()
    while result.startswith("&"):
        result = strip_reference(result)
    return result


def strip_generics(type_str: str) -> str:
    """
    Strip generic arguments.

    Examples:
        "Pool<T>" -> "Pool"
        "Map<Key, Vec<Value>>" -> "Map"
        "anchor_lang::accounts::program::Program<'info, System>" -> "anchor_lang::accounts::program::Program"
    """
    if "<" not in type_str:
        return type_str.strip()
    idx = type_str.index("<")
    return type_str[:idx].strip()


def adt_path(type_str: Optional[str]) -> Optional[str]:
    """
    Path of the ADT a type names, or None for references, tuples, slices,
    unresolved types and type parameters.

    Examples:
        "solana_program::account_info::AccountInfo<'info>" -> "solana_program::account_info::AccountInfo"
        "&AccountInfo<'info>" -> None
        "(u8, u8)" -> None
        "T" -> None
    """
    if not is_resolved(type_str):
        return None
    stripped = type_str.strip()
    if stripped.startswith(("&", "(", "[", "*", "fn(", "dyn ", "impl ")):
        return None
    path = strip_generics(stripped)
    # bare single-segment names are type parameters or primitives
    if "::" not in path:
        return None
    return path


def is_resolved(type_str: Optional[str]) -> bool:
    """False for missing types and the front-end's error/inference placeholders."""
    if type_str is None:
        return False
    stripped = type_str.strip()
    return bool(stripped) and stripped not in ("_", "{unknown}", "{error}") and not stripped.startswith("?")
