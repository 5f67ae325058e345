"""Sample engine findings used by the offline demo."""

SAMPLE_URL = "https://bankapp.example.com"
SAMPLE_TITLE = "Online Banking Dashboard"

SAMPLE_FINDINGS = [
    {
        "code": "color-contrast",
        "type": "warning",
        "message": "Insufficient color contrast between button text and background",
        "selector": ".primary-button",
    },
    {
        "code": "form-field-multiple-labels",
        "type": "warning",
        "message": "Form field has multiple labels",
        "selector": "#account-number",
    },
    {
        "code": "heading-order",
        "type": "notice",
        "message": "Skipped heading level in page outline",
        "selector": ".dashboard h3",
    },
    {
        "code": "link-name",
        "type": "notice",
        "message": "Link text is not descriptive",
        "selector": "a.learn-more",
    },
    {
        "code": "image-alt",
        "type": "notice",
        "message": "Image missing alternative text",
        "selector": "img.transaction-icon",
    },
    {
        "code": "aria-required-attr",
        "type": "info",
        "message": "ARIA attribute is missing",
        "selector": '[role="region"]',
    },
    {
        "code": "button-name",
        "type": "info",
        "message": "Button element lacks accessible name",
        "selector": ".icon-only-button",
    },
    {
        "code": "select-name",
        "type": "info",
        "message": "Select element lacks accessible name",
        "selector": "select.filter",
    },
]
