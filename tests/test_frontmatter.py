from sfc_markdown.frontmatter import (
    MarkdownDocument,
    compose_document,
    derive_title,
    ensure_leading_heading,
)


def test_derive_title() -> None:
    assert derive_title("quick-start.vue") == "Quick Start"
    assert derive_title("base_helpers.vue") == "Base Helpers"
    assert derive_title("api.vue") == "Api"
    assert derive_title("getting--started") == "Getting Started"


def test_compose_document_adds_frontmatter_and_title_heading() -> None:
    document = compose_document("## Routes\n\nText", "router.vue", "Base Framework")
    assert isinstance(document, MarkdownDocument)
    assert document.text == (
        "---\n"
        "title: Router\n"
        "description: Router documentation for Base Framework.\n"
        "---\n"
        "\n"
        "# Router\n"
        "\n"
        "## Routes\n"
        "\n"
        "Text\n"
    )


def test_existing_leading_heading_is_kept() -> None:
    document = compose_document("# Getting Started\n\nBody", "quick-start.vue", "Base Framework")
    assert document.body == "# Getting Started\n\nBody"
    assert document.title == "Quick Start"


def test_single_h1_is_moved_to_the_top() -> None:
    body = ensure_leading_heading("Intro\n\n# Real Title\n\nMore", "Fallback")
    assert body.split("\n")[0] == "# Real Title"
    assert body.count("# Real Title") == 1
    assert "# Fallback" not in body


def test_h1_inside_code_fence_is_ignored() -> None:
    body = ensure_leading_heading("Text\n\n```md\n# not a heading\n```", "Doc")
    assert body.startswith("# Doc\n\nText")
    assert "# not a heading" in body


def test_empty_body_still_gets_heading() -> None:
    document = compose_document("", "cli.vue", "Base Framework")
    assert document.body == "# Cli"


def test_frontmatter_quotes_unsafe_values() -> None:
    document = compose_document("# X", "x.vue", "Acme: Pro")
    assert 'description: "X documentation for Acme: Pro."' in document.frontmatter


def test_recomposing_output_replaces_previous_frontmatter() -> None:
    first = compose_document("Body text", "storage.vue", "Base Framework")
    second = compose_document(first.text, "storage.vue", "Base Framework")
    assert second.text == first.text


def test_info_string_line_does_not_close_a_fence() -> None:
    body = ensure_leading_heading("```\n```js\n# inside\n```\n\n# Real", "Doc")
    assert body.startswith("# Real\n\n```\n```js\n# inside\n```")
