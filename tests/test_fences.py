from sfc_markdown.fences import is_fence_close, iter_segments, protect_fences, restore_fences


def test_fence_close_needs_a_bare_fence_line() -> None:
    assert is_fence_close("```", "```")
    assert is_fence_close("  `````  ", "```")
    assert not is_fence_close("```js", "```")
    assert not is_fence_close("~~~", "```")


def test_protect_and_restore_round_trip() -> None:
    text = "Intro\n\n```html\n<p>x</p>\n```\n\n~~~\n<b>y</b>\n~~~"
    protected, fences = protect_fences(text)
    assert "<" not in protected
    assert len(fences) == 2
    assert restore_fences(protected, fences) == text


def test_unclosed_fence_is_left_in_place() -> None:
    text = "```\n<p>open</p>"
    assert protect_fences(text) == (text, [])


def test_fence_lines_inside_raw_tags_are_not_protected() -> None:
    text = "<pre>\n```\ncode\n```\n</pre>"
    assert protect_fences(text) == (text, [])


def test_segments_alternate_between_text_and_fences() -> None:
    text = "a\n```\nb\n```js\n```\nc"
    assert list(iter_segments(text)) == [
        (False, "a"),
        (True, "```\nb\n```js\n```"),
        (False, "c"),
    ]
