"""Render before/after with Python-Markdown to check the lists really come out tight."""

from markdown import markdown

from tighten_lists import format_text


def test_loose_list_renders_tight():
    src = "Intro\n\n- alpha\n\n- beta\n\n- gamma\n"
    assert "<p>alpha</p>" in markdown(src)

    html = markdown(format_text(src))
    assert "<li>alpha</li>" in html
    assert "<li>gamma</li>" in html
    assert html.count("<ul>") == 1


def test_list_after_paragraph_gets_separated():
    # without the blank line the list would be swallowed by the paragraph
    html = markdown(format_text("Intro\n* one\n* two\n"))
    assert "<p>Intro</p>" in html
    assert "<li>one</li>" in html


def test_nested_list_renders_tight():
    html = markdown(format_text("- a\n\n    * x\n\n    * y\n"))
    assert "<li>x</li>" in html
    assert "<p>x</p>" not in html
