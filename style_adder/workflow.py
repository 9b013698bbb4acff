#!/usr/bin/env python3
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from style_adder.asset_fetcher import download
from style_adder.errors import UsageError
from style_adder.identifiers import StyleIdentifiers, derive_identifiers
from style_adder.preview_generator import generate_preview
from style_adder.source_patcher import (
    PatchResult,
    append_to_category_style_list,
    escape_single_quoted,
    escape_template_literal,
    insert_after_last_matching_line,
    insert_before_block_end,
    insert_before_last_closing_brace,
)
from style_adder.templates import KNOWN_CATEGORIES, StyleTemplate, get_template

logger = logging.getLogger(__name__)

PREVIEW_FILENAME = 'preview.jpg'
PROMPT_PREVIEW_CHARS = 200
PROMPT_TABLE_MARKER = 'export const STYLE_PROMPTS'


@dataclass
class ProjectLayout:
    """Where the files a style touches live inside the app checkout."""
    root: Path
    styles_module: Path
    prompts_module: Path
    category_screens: List[Path]
    assets_dir: Path

    @classmethod
    def from_root(cls, root) -> 'ProjectLayout':
        root = Path(root)
        return cls(
            root=root,
            styles_module=root / 'mobile' / 'src' / 'constants' / 'styles.ts',
            prompts_module=root / 'backend' / 'src' / 'services' / 'nanoBanana.ts',
            category_screens=[
                root / 'mobile' / 'app' / 'style-select.tsx',
                root / 'mobile' / 'src' / 'screens' / 'StyleSelectScreen.tsx',
            ],
            assets_dir=root / 'mobile' / 'assets',
        )

    @staticmethod
    def asset_require_path(folder_name: str) -> str:
        # relative to mobile/src/constants/styles.ts
        return f"../../assets/{folder_name}/{PREVIEW_FILENAME}"


@dataclass
class WorkflowResult:
    identifiers: StyleIdentifiers
    preview_url: str
    approved: bool
    asset_path: Optional[Path] = None
    patches: List[PatchResult] = field(default_factory=list)


# --- Confirmation strategies ---

def console_confirm(preview_url: str) -> bool:
    """Blocks until the operator enters a line. 'n'/'no' or end of input cancels."""
    print("\nPlease review the preview image above.")
    print("Press Enter to continue and add this style, type 'n' to cancel (or Ctrl+C)...")
    try:
        answer = input()
    except EOFError:
        logger.warning("No operator input available. Treating as cancel.")
        return False
    return answer.strip().lower() not in ('n', 'no')


def auto_approve(preview_url: str) -> bool:
    return True


def auto_reject(preview_url: str) -> bool:
    return False


# --- Snippets for the target sources ---

def build_import_line(identifiers: StyleIdentifiers) -> str:
    asset_path = ProjectLayout.asset_require_path(identifiers.folder_name)
    return f"const {identifiers.constant_name} = require('{asset_path}');"


def build_preset_entry(identifiers: StyleIdentifiers, style_name: str, description: str, prompt: str) -> str:
    key = identifiers.key
    constant = identifiers.constant_name
    return (
        f"  {key}: {{\n"
        f"    key: '{key}',\n"
        f"    name: '{escape_single_quoted(style_name)}',\n"
        f"    description: '{escape_single_quoted(description)}',\n"
        f"    thumbnail: {constant},\n"
        f"    thumbnails: [{constant}],\n"
        f"    prompt: `{escape_template_literal(prompt)}`,\n"
        f"  }},"
    )


def build_prompt_entry(key: str, prompt: str) -> str:
    return f"  {key}: `{escape_template_literal(prompt)}`,"


def is_asset_require_line(line: str) -> bool:
    return line.strip().startswith('const ') and 'require(' in line


def apply_source_patches(layout: ProjectLayout, identifiers: StyleIdentifiers, category_id: str,
                         style_name: str, description: str, prompt: str,
                         allow_duplicates: bool = False) -> List[PatchResult]:
    """
    Registers the style in the styles module, the backend prompt table and the
    category screens. Every patch is attempted; failures are reported in the
    returned results, not raised.
    """
    key = identifiers.key

    def guard(pattern):
        return None if allow_duplicates else pattern

    results = []

    # 1. Frontend styles module: asset import + preset definition
    results.append(insert_after_last_matching_line(
        layout.styles_module,
        is_asset_require_line,
        build_import_line(identifiers),
        skip_if=guard(rf"^\s*const\s+{identifiers.constant_name}\s*="),
    ))
    results.append(insert_before_last_closing_brace(
        layout.styles_module,
        build_preset_entry(identifiers, style_name, description, prompt),
        skip_if=guard(rf"^\s*{key}\s*:\s*\{{"),
    ))

    # 2. Backend prompt table
    results.append(insert_before_block_end(
        layout.prompts_module,
        PROMPT_TABLE_MARKER,
        build_prompt_entry(key, prompt),
        skip_if=guard(rf"^\s*{key}\s*:\s*`"),
    ))

    # 3. Category screens (always guarded)
    for screen in layout.category_screens:
        results.append(append_to_category_style_list(screen, category_id, key))

    return results


def add_style(category_id: str, style_name: str, description: str,
              layout: ProjectLayout,
              templates: Optional[Dict[str, StyleTemplate]] = None,
              generator=None,
              confirm: Callable[[str], bool] = console_confirm,
              fetch: Optional[Callable[[str, Path], Path]] = None,
              allow_duplicates: bool = False) -> WorkflowResult:
    """
    Runs the whole add-style pipeline: derive identifiers, look up the prompt
    template, generate a preview, wait for approval, download the preview into
    the app's assets and register the style in the app sources.

    Fatal problems (UsageError, TemplateNotFoundError, GenerationError,
    DownloadError) propagate. Nothing already done is rolled back.
    Patch problems are reported in WorkflowResult.patches.
    """
    missing = [label for label, value in (
        ('category', category_id), ('style name', style_name), ('description', description)
    ) if not value or not value.strip()]
    if missing:
        raise UsageError(f"Missing required argument(s): {', '.join(missing)}")

    identifiers = derive_identifiers(style_name)
    print(f"Category: {category_id}")
    print(f"Style Name: {style_name}")
    print(f"Description: {description}\n")
    print(f"Style Key: {identifiers.key}")
    print(f"Constant: {identifiers.constant_name}")
    print(f"Folder: {identifiers.folder_name}\n")

    if category_id not in KNOWN_CATEGORIES:
        logger.warning(f"Category '{category_id}' is not one of the known categories: {', '.join(KNOWN_CATEGORIES)}")

    template = get_template(identifiers.key, templates)

    print("Prompt:")
    print('-' * 80)
    print(template.prompt[:PROMPT_PREVIEW_CHARS] + '...')
    print('-' * 80)

    preview_url = generate_preview(template.prompt, template.preview_image, generator)
    print(f"\nPreview generated: {preview_url}")
    print(f"PREVIEW LINK: {preview_url}")

    if not confirm(preview_url):
        logger.info("Style addition cancelled by operator. No files were changed.")
        return WorkflowResult(identifiers=identifiers, preview_url=preview_url, approved=False)

    asset_dir = layout.assets_dir / identifiers.folder_name
    if not asset_dir.exists():
        asset_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created folder: {asset_dir}")

    fetch = fetch or download
    asset_path = fetch(preview_url, asset_dir / PREVIEW_FILENAME)
    print(f"Saved: {asset_path}")

    patches = apply_source_patches(
        layout, identifiers, category_id, style_name, description, template.prompt,
        allow_duplicates=allow_duplicates,
    )
    return WorkflowResult(
        identifiers=identifiers,
        preview_url=preview_url,
        approved=True,
        asset_path=asset_path,
        patches=patches,
    )
