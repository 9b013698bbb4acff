#!/usr/bin/env python3
import re
from dataclasses import dataclass

from style_adder.errors import UsageError

CONSTANT_SUFFIX = '_PHOTO_1'


@dataclass(frozen=True)
class StyleIdentifiers:
    key: str            # e.g. with_supercar
    constant_name: str  # e.g. WITH_SUPERCAR_PHOTO_1
    folder_name: str    # e.g. WithSupercar


def to_key(name: str) -> str:
    """'With Supercar' -> 'with_supercar'"""
    text = re.sub(r'\s+', '_', name.lower())
    return re.sub(r'[^a-z0-9_]', '', text)


def to_constant_name(name: str) -> str:
    """'With Supercar' -> 'WITH_SUPERCAR_PHOTO_1'"""
    text = re.sub(r'\s+', '_', name.upper())
    return re.sub(r'[^A-Z0-9_]', '', text) + CONSTANT_SUFFIX


def to_folder_name(name: str) -> str:
    """'With Supercar' -> 'WithSupercar'"""
    text = re.sub(r'\s+', '', name)
    return re.sub(r'[^a-zA-Z0-9]', '', text)


def derive_identifiers(display_name: str) -> StyleIdentifiers:
    """
    Derives the registry key, asset constant and asset folder for a style.

    Raises:
        UsageError: if the name has no characters usable in a key.
    """
    key = to_key(display_name)
    folder_name = to_folder_name(display_name)
    if not key or not folder_name:
        raise UsageError(f"Style name '{display_name}' does not produce a usable key (need letters or digits).")
    return StyleIdentifiers(
        key=key,
        constant_name=to_constant_name(display_name),
        folder_name=folder_name,
    )
