"""
WCAG lookup tables keyed by accessibility rule code.

All lookups are total: unknown codes fall back to a default value.
"""

from types import MappingProxyType


DEFAULT_WCAG_LEVEL = "AA"
DEFAULT_WCAG_CRITERIA = "WCAG 2.1 Level A - General Accessibility"
DEFAULT_FIX_SUGGESTION = "Review WCAG 2.1 guidelines for this issue type"

WCAG_LEVELS = MappingProxyType({
    "image-alt": "A",
    "color-contrast": "AA",
    "heading-order": "A",
    "label": "A",
    "button-name": "A",
    "link-name": "A",
    "form-field-multiple-labels": "A",
    "duplicate-id": "A",
    "aria-required-attr": "A",
    "aria-valid-attr": "A",
    "select-name": "A",
    "textarea-name": "A",
})

WCAG_CRITERIA = MappingProxyType({
    "image-alt": "WCAG 2.1 Level A - 1.1.1 Non-text Content",
    "color-contrast": "WCAG 2.1 Level AA - 1.4.3 Contrast (Minimum)",
    "heading-order": "WCAG 2.1 Level A - 1.3.1 Info and Relationships",
    "label": "WCAG 2.1 Level A - 1.3.1 Info and Relationships",
    "button-name": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
    "link-name": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
    "form-field-multiple-labels": "WCAG 2.1 Level A - 1.3.1 Info and Relationships",
    "duplicate-id": "WCAG 2.1 Level A - 4.1.1 Parsing",
    "aria-required-attr": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
    "aria-valid-attr": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
    "select-name": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
    "textarea-name": "WCAG 2.1 Level A - 4.1.2 Name, Role, Value",
})

FIX_SUGGESTIONS = MappingProxyType({
    "image-alt": "Add descriptive alt text to all images",
    "color-contrast": "Increase color contrast ratio to at least 4.5:1 for AA compliance",
    "heading-order": "Use proper heading hierarchy (h1, h2, h3, etc.)",
    "label": "Associate form labels with inputs using for/id attributes",
    "button-name": "Ensure all buttons have accessible names",
    "link-name": 'Provide meaningful link text (avoid "click here")',
    "form-field-multiple-labels": "Use only one label per form field",
    "duplicate-id": "Remove duplicate ID attributes from elements",
    "aria-required-attr": "Add required ARIA attributes",
    "aria-valid-attr": "Use valid ARIA attribute values",
    "select-name": "Add accessible names to select elements",
    "textarea-name": "Add accessible names to textarea elements",
})

# axe-core tag sets requested for each conformance level
AXE_TAGS_BY_LEVEL = MappingProxyType({
    "A": ("wcag2a", "wcag21a"),
    "AA": ("wcag2a", "wcag21a", "wcag2aa", "wcag21aa"),
    "AAA": ("wcag2a", "wcag21a", "wcag2aa", "wcag21aa", "wcag2aaa"),
})


def wcag_level_for(code: str) -> str:
    """Map a rule code to its WCAG conformance level."""
    return WCAG_LEVELS.get(code, DEFAULT_WCAG_LEVEL)


def wcag_criteria_for(code: str) -> str:
    """Map a rule code to a human readable WCAG success criterion."""
    return WCAG_CRITERIA.get(code, DEFAULT_WCAG_CRITERIA)


def fix_suggestion_for(code: str) -> str:
    return FIX_SUGGESTIONS.get(code, DEFAULT_FIX_SUGGESTION)


def axe_tags_for(level: str) -> tuple:
    return AXE_TAGS_BY_LEVEL.get((level or "").upper(), AXE_TAGS_BY_LEVEL[DEFAULT_WCAG_LEVEL])
