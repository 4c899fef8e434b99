import pytest

from sfc_markdown.errors import ExtractionError
from sfc_markdown.extraction import extract_markup


def test_extract_drops_script_style_and_comments() -> None:
    source = """<script setup lang="ts">
const leak = '<p>from script</p>'
</script>

<template>
  <!-- page header -->
  <div class="docs">
    <h1>Install</h1>
  </div>
</template>

<style scoped>
.docs { color: red; }
</style>
"""
    markup = extract_markup(source)
    assert markup.startswith('<div class="docs">')
    assert markup.endswith("</div>")
    assert "from script" not in markup
    assert "color" not in markup
    assert "page header" not in markup
    assert "template" not in markup


def test_nested_templates_are_kept() -> None:
    markup = extract_markup('<template><template v-if="a"><p>x</p></template></template>')
    assert markup == '<template v-if="a"><p>x</p></template>'


def test_markup_without_template_wrapper() -> None:
    assert extract_markup("  <p>plain</p>\n") == "<p>plain</p>"


@pytest.mark.parametrize(
    "source, fragment",
    [
        ("<template><p>x</p>", "template"),
        ("<template><p>x</p></template><script>const a = 1", "script"),
        ("<template><p>x</p></template><style>.a {}", "style"),
        ("<template><p>x</p><!-- oops</template>", "comment"),
    ],
)
def test_unterminated_sections_raise(source: str, fragment: str) -> None:
    with pytest.raises(ExtractionError) as exc:
        extract_markup(source)
    assert fragment in str(exc.value)
    assert exc.value.code == "EXTRACTION_FAILED"


def test_comment_mentioning_script_is_not_a_block() -> None:
    markup = extract_markup("<template><!-- TODO move <script> helpers --><p>Hi</p></template>")
    assert markup == "<p>Hi</p>"


def test_component_named_like_script_is_kept() -> None:
    source = "<template><script-runner cmd='x'>Run</script-runner><p>Hi</p></template>"
    assert extract_markup(source) == "<script-runner cmd='x'>Run</script-runner><p>Hi</p>"


def test_script_inside_fenced_code_survives() -> None:
    source = "# Setup\n\n```html\n<template>\n  <p>Hi</p>\n</template>\n<script>\nboot()\n</script>\n```"
    assert extract_markup(source) == source
