from pathlib import Path

import pytest

from style_adder.workflow import ProjectLayout

STYLES_TS = """import { StylePreset } from '../types';

// Business photos
const BUSINESS_PHOTO_1 = require('../../assets/business/example1.png');

// With Puppy photos
const PUPPY_PHOTO_1 = require('../../assets/withpuppy/example1.png');

export const STYLE_PRESETS: Record<string, StylePreset> = {
  business: {
    key: 'business',
    name: 'Business Photo',
    description: 'Professional business portrait',
    thumbnail: BUSINESS_PHOTO_1,
    thumbnails: [BUSINESS_PHOTO_1],
    prompt: `Navy suit, studio backdrop.`
  },
  with_puppy: {
    key: 'with_puppy',
    name: 'With Puppy',
    description: 'Cute portrait with a puppy',
    thumbnail: PUPPY_PHOTO_1,
    thumbnails: [PUPPY_PHOTO_1],
    prompt: `Golden retriever puppy.`
  }
};

export const STYLE_LIST = Object.values(STYLE_PRESETS);
"""

NANO_BANANA_TS = """import { supabase } from './supabase';

export const STYLE_PROMPTS: Record<string, string> = {
  // Business Photo style
  business: `Navy suit, studio backdrop.`,

  with_puppy: `Golden retriever puppy.`
};

export async function generateImage(styleKey: string) {
  const prompt = STYLE_PROMPTS[styleKey];
  if (!prompt) {
    throw new Error(`Unknown style: ${styleKey}`);
  }
  return { prompt };
};
"""

STYLE_SELECT_TSX = """const CATEGORIES = [
  {
    id: 'professional',
    name: 'Professional',
    icon: 'P',
    styles: ['business', 'professional_headshot'],
  },
  {
    id: 'lifestyle',
    name: 'Social & Lifestyle',
    icon: 'L',
    styles: ['a', 'b'],
  },
];

export default function StyleSelectScreen() {
  return null;
}
"""


def write_project(root: Path, with_second_screen: bool = False) -> ProjectLayout:
    layout = ProjectLayout.from_root(root)
    layout.styles_module.parent.mkdir(parents=True)
    layout.styles_module.write_text(STYLES_TS, encoding='utf-8')
    layout.prompts_module.parent.mkdir(parents=True)
    layout.prompts_module.write_text(NANO_BANANA_TS, encoding='utf-8')
    layout.category_screens[0].parent.mkdir(parents=True)
    layout.category_screens[0].write_text(STYLE_SELECT_TSX, encoding='utf-8')
    if with_second_screen:
        layout.category_screens[1].parent.mkdir(parents=True)
        layout.category_screens[1].write_text(STYLE_SELECT_TSX, encoding='utf-8')
    return layout


@pytest.fixture
def project(tmp_path) -> ProjectLayout:
    """An app checkout with the three target sources (second category screen absent)."""
    return write_project(tmp_path)


@pytest.fixture
def make_project(tmp_path):
    """Factory for checkouts with optional extra category screen."""
    def _make(with_second_screen: bool = False) -> ProjectLayout:
        return write_project(tmp_path, with_second_screen=with_second_screen)
    return _make
