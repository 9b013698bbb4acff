#!/usr/bin/env python3
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from style_adder.errors import TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyleTemplate:
    key: str
    prompt: str
    preview_image: str  # reference image URL sent with the preview request


# Every style prompt starts with this so the subject's face is preserved
FACE_CONSISTENCY_PREFIX = (
    "Keep the facial features of the person in the uploaded image exactly consistent. "
    "Preserve 100% accuracy of the face from the reference image. Important: do not change the face."
)

DEFAULT_PREVIEW_IMAGE = 'https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800'

# Categories shown on the style-select screen
KNOWN_CATEGORIES: Dict[str, str] = {
    'professional': 'Professional',
    'lifestyle': 'Social & Lifestyle',
    'creative': 'Creative',
    'fashion': 'Fashion',
    'seasonal': 'Seasonal',
}

STYLE_TEMPLATES: Dict[str, StyleTemplate] = {
    'with_supercar': StyleTemplate(
        key='with_supercar',
        prompt=f"""{FACE_CONSISTENCY_PREFIX}

Create a hyper-realistic, luxury lifestyle photoshoot.

SUBJECT: The person is standing confidently next to a sleek Lamborghini Aventador SVJ in Arancio Argos (vibrant orange). They are wearing a tailored charcoal gray suit with a crisp white dress shirt (no tie), paired with luxury black leather loafers. A premium Swiss watch is visible on their wrist.

POSE: Standing at a 3/4 angle to the camera, one hand casually resting on the car's roof, the other in their pocket. Confident, relaxed posture with a subtle smile.

EXPRESSION: Successful, confident, approachable. Natural smile, eyes focused on camera.

CAR DETAILS: Lamborghini Aventador SVJ, glossy orange paint with carbon fiber accents, aggressive aerodynamic design, scissor doors closed, positioned at a dynamic angle showing both the front and side profile.

ENVIRONMENT: Modern luxury setting - either a contemporary architectural space with glass and concrete, or a scenic coastal road at golden hour. Clean, minimal background that doesn't distract from the subject and car.

LIGHTING: Golden hour lighting (warm, soft sunlight), creating beautiful highlights on the car's curves and the person's face. Subtle rim lighting separating subject from background. Professional color grading with rich, warm tones.

CAMERA: Shot with a Canon EOS R5, 35mm f/1.4 lens, shallow depth of field (f/2.8) keeping both the person and car in focus while softly blurring the background. Eye-level perspective. Professional automotive photography style.

QUALITY: 8K resolution, ultra-sharp details, professional color grading, cinematic look, magazine-quality commercial photography.""",
        preview_image=DEFAULT_PREVIEW_IMAGE,
    ),
}


def load_templates_file(json_path: Path) -> Dict[str, StyleTemplate]:
    """
    Loads extra style templates from a JSON file shaped like
    {"templates": [{"key": ..., "prompt": ..., "preview_image": ...}]}.

    Entries without a key or prompt are skipped; preview_image defaults to the
    stock portrait. Returns an empty dict if the file is missing or invalid.
    """
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Style templates file not found: {json_path}")
        return {}
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON in style templates file: {json_path}")
        return {}

    templates = {}
    for idx, entry in enumerate(data.get('templates', []) if isinstance(data, dict) else []):
        key = entry.get('key') if isinstance(entry, dict) else None
        prompt = entry.get('prompt') if isinstance(entry, dict) else None
        if not key or not prompt:
            logger.warning(f"Skipping template at index {idx}: missing key or prompt")
            continue
        templates[key] = StyleTemplate(
            key=key,
            prompt=prompt,
            preview_image=entry.get('preview_image') or DEFAULT_PREVIEW_IMAGE,
        )
    logger.info(f"Loaded {len(templates)} style template(s) from {json_path}")
    return templates


def build_template_table(templates_file: Path | None = None) -> Dict[str, StyleTemplate]:
    """Built-in templates, overridden by any loaded from templates_file."""
    table = dict(STYLE_TEMPLATES)
    if templates_file:
        table.update(load_templates_file(Path(templates_file)))
    return table


def get_template(key: str, table: Dict[str, StyleTemplate] | None = None) -> StyleTemplate:
    table = STYLE_TEMPLATES if table is None else table
    template = table.get(key)
    if template is None:
        raise TemplateNotFoundError(key)
    return template
