"""Bidirectional mapping between docset type codes and canonical type names."""

from __future__ import annotations


# Keys are lower-case; lookups fold case before matching.
TYPE_MAP: dict[str, str] = {
    "func": "Function",
    "cl": "Class",
    "clm": "Method",
    "clconst": "Constant",
    "tdef": "Type",
    "macro": "Macro",
    "cat": "Category",
    "instm": "Method",
    "instp": "Property",
    "intf": "Interface",
    "struct": "Struct",
    "enum": "Enum",
    "union": "Union",
    "var": "Variable",
    "const": "Constant",
    "file": "File",
    "keyword": "Keyword",
    "attribute": "Attribute",
    "guide": "Guide",
}

# First element is always the canonical name itself, second the most common stored code.
REVERSE_MAP: dict[str, list[str]] = {
    "Function": ["Function", "func"],
    "Class": ["Class", "cl"],
    "Method": ["Method", "clm", "instm"],
    "Constant": ["Constant", "clconst", "const"],
    "Type": ["Type", "tdef"],
    "Macro": ["Macro", "macro"],
    "Category": ["Category", "cat"],
    "Property": ["Property", "instp"],
    "Interface": ["Interface", "intf"],
    "Struct": ["Struct", "struct"],
    "Enum": ["Enum", "enum"],
    "Union": ["Union", "union"],
    "Variable": ["Variable", "var"],
    "File": ["File", "file"],
    "Keyword": ["Keyword", "keyword"],
    "Attribute": ["Attribute", "attribute"],
    "Guide": ["Guide", "guide"],
}


def normalize(code: str) -> str:
    """Return the canonical name for a type code, or the code unchanged."""

    return TYPE_MAP.get(code.lower(), code)


def denormalize_all(name: str) -> list[str]:
    """Return every stored code that represents a canonical type name."""

    return list(REVERSE_MAP.get(name, [name]))


def denormalize_one(name: str) -> str:
    codes = denormalize_all(name)
    return codes[1] if len(codes) > 1 else name


def expand_types(names: tuple[str, ...] | list[str]) -> list[str]:
    """Flatten canonical names into a de-duplicated list of stored codes."""

    codes: list[str] = []
    for name in names:
        for code in denormalize_all(name):
            if code not in codes:
                codes.append(code)
    return codes
