"""Tests for the live preview renderer."""

import re

import pytest

from bibpreview.layout import LayoutHelper, prepare_layout_text
from bibpreview.model import BibEntry, BibDatabase, BibDatabaseContext


class CountingRenderer:
    """Wraps refresh() to count calls."""

    def __init__(self, renderer):
        self.count = 0
        original = renderer.refresh

        def counted():
            self.count += 1
            original()

        renderer.refresh = counted


def test_render_matches_compiled_layout(make_renderer, entry):
    """Test output equals compiling and rendering the layout directly."""
    raw = "\\author: \\format[HTMLChars]{\\title}__NEWLINE__\\begin{year}(\\year)\\end{year}"
    renderer = make_renderer(raw)
    renderer.set_entry(entry)
    renderer.refresh()

    expected = LayoutHelper(prepare_layout_text(raw)).get_layout_from_text().do_layout(entry, None, None)
    assert renderer.rendered_output == expected
    assert renderer.rendered_output == "Donald E. Knuth: Literate Programming\n(1984)"


def test_title_year_scenario(make_renderer, sink):
    """Test the newline marker scenario end to end."""
    renderer = make_renderer("Title: \\NAME__NEWLINE__Year: \\YEAR")
    renderer.set_entry(BibEntry(fields={"name": "Foo", "year": "2020"}))

    assert renderer.rendered_output == "Title: Foo\nYear: 2020"
    assert sink.text == "Title: Foo\nYear: 2020"


def test_newline_marker_replaced_before_compiling(make_renderer):
    """Test the compiler receives real newlines, independent of any entry."""
    received = []

    def compiler(text):
        received.append(text)
        return LayoutHelper(text).get_layout_from_text()

    renderer = make_renderer("a__NEWLINE__b", layout_compiler=compiler)
    renderer.update_layout("x__NEWLINE____NEWLINE__y")

    assert received == ["a\nb", "x\n\ny"]
    assert renderer.layout_format == "x__NEWLINE____NEWLINE__y"


def test_refresh_without_entry_is_empty(make_renderer, sink):
    renderer = make_renderer()
    renderer.refresh()
    assert renderer.rendered_output == ""
    assert sink.text == ""
    assert sink.calls == ["set_text", "scroll_to_origin"]


def test_malformed_layout_renders_empty(make_renderer, entry, sink):
    """Test a malformed layout leaves no layout and renders nothing, without raising."""
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    assert renderer.rendered_output == "Literate Programming"

    renderer.update_layout("\\begin{title} unterminated")
    assert renderer.layout is None

    renderer.refresh()
    assert renderer.rendered_output == ""
    assert sink.text == ""


def test_set_entry_recompiles_layout(make_renderer, entry):
    """Test every entry switch recompiles the layout string."""
    compiled = []

    def compiler(text):
        compiled.append(text)
        return LayoutHelper(text).get_layout_from_text()

    renderer = make_renderer("\\title", layout_compiler=compiler)
    renderer.set_entry(entry)
    renderer.set_entry(BibEntry(fields={"title": "Other"}))

    assert len(compiled) == 3


def test_set_layout_overrides_compiled_layout(make_renderer, entry):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    renderer.set_layout(LayoutHelper("\\year").get_layout_from_text())
    renderer.refresh()
    assert renderer.rendered_output == "1984"

    renderer.set_layout(None)
    renderer.refresh()
    assert renderer.rendered_output == ""


def test_field_change_refreshes(make_renderer, entry, sink):
    """Test field changes on the observed entry re-render it."""
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)

    entry.set_field("title", "The Art of Computer Programming")

    assert renderer.rendered_output == "The Art of Computer Programming"
    assert sink.text == "The Art of Computer Programming"


def test_each_field_change_refreshes_once(make_renderer, entry):
    """Test two field changes trigger exactly two refreshes."""
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    counter = CountingRenderer(renderer)

    entry.set_field("title", "One")
    entry.set_field("year", "1985")

    assert counter.count == 2


def test_replaced_entry_is_unsubscribed(make_renderer, entry):
    """Test events on the previous entry no longer refresh the preview."""
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    replacement = BibEntry(fields={"title": "Replacement"})
    renderer.set_entry(replacement)
    counter = CountingRenderer(renderer)

    entry.set_field("title", "Changed")

    assert counter.count == 0
    assert not entry.has_listener(renderer)
    assert replacement.has_listener(renderer)
    assert renderer.rendered_output == "Replacement"


def test_setting_same_entry_keeps_subscription(make_renderer, entry):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    renderer.set_entry(entry)
    assert entry.has_listener(renderer)


def test_set_entry_none_clears(make_renderer, entry, sink):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    renderer.set_entry(None)

    assert renderer.get_entry() is None
    assert not entry.has_listener(renderer)
    assert sink.text == ""


def test_entry_given_to_constructor_is_shown(make_renderer, entry, sink):
    renderer = make_renderer("\\bibtexkey", entry=entry)
    assert renderer.get_entry() is entry
    assert sink.text == "knuth1984"


def test_database_context_change_waits_for_refresh(make_renderer, entry):
    """Test replacing the context alone does not re-render."""
    renderer = make_renderer("\\journal")
    renderer.set_entry(entry)
    assert renderer.rendered_output == "#cj#"

    renderer.set_database_context(BibDatabaseContext(BibDatabase({"cj": "The Computer Journal"})))
    assert renderer.rendered_output == "#cj#"

    renderer.refresh()
    assert renderer.rendered_output == "The Computer Journal"


def test_highlight_pattern_refreshes(make_renderer, entry):
    renderer = make_renderer("\\author")
    renderer.set_entry(entry)

    renderer.set_highlight_pattern(re.compile("Knuth"))
    assert "<span" in renderer.rendered_output
    assert renderer.highlight_pattern.pattern == "Knuth"

    renderer.set_highlight_pattern(None)
    assert renderer.rendered_output == "Donald E. Knuth"


def test_highlight_uses_configured_color(make_renderer, entry):
    """Test the default compiler takes the highlight color from the config."""
    from bibpreview.protocols import PreviewConfig, set_preview_config
    from bibpreview.theming import PreviewColorScheme

    set_preview_config(PreviewConfig(color_scheme=PreviewColorScheme(highlight_bg=(1, 2, 3))))
    renderer = make_renderer("\\year")
    renderer.set_entry(entry)
    renderer.set_highlight_pattern(re.compile("1984"))

    assert renderer.rendered_output == '<span style="background-color:#010203;">1984</span>'


def test_refresh_resets_entry_number(make_renderer, entry, counter):
    """Test each refresh renders entry number 1."""
    renderer = make_renderer("#\\entrynumber")
    counter.value = 42
    renderer.set_entry(entry)
    assert renderer.rendered_output == "#1"

    counter.increment()
    renderer.refresh()
    assert counter.value == 1
    assert renderer.rendered_output == "#1"


def test_refresh_publishes_text_then_scrolls(make_renderer, entry, sink):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    assert sink.calls[-2:] == ["set_text", "scroll_to_origin"]


def test_refresh_off_display_thread_is_posted(make_renderer, entry, sink):
    """Test publishing is deferred to the display thread when refresh runs elsewhere."""

    class DeferredDisplayThread:
        def __init__(self):
            self.pending = []

        def is_display_thread(self):
            return False

        def post(self, fn):
            self.pending.append(fn)

        def run(self, fn):
            self.post(fn)

    display = DeferredDisplayThread()
    renderer = make_renderer("\\title", display_thread=display)
    renderer.set_entry(entry)

    assert renderer.rendered_output == "Literate Programming"
    assert sink.text == ""

    for fn in display.pending:
        fn()
    assert sink.text == "Literate Programming"


def test_clipboard_gets_rendered_output(make_renderer, entry, sink):
    """Test copying puts exactly the rendered output on the clipboard and clears the selection."""
    renderer = make_renderer("\\author__NEWLINE__\\title")
    renderer.set_entry(entry)
    renderer.refresh()

    renderer.export_to_clipboard()

    assert sink.clipboard == renderer.rendered_output
    assert sink.calls[-3:] == ["select_all", "copy", "clear_selection"]
    assert sink.selected is False


def test_print_job_uses_cite_key(make_renderer, entry, print_service, background):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)

    renderer.export_as_print_job()

    assert background.jobs == 1
    assert print_service.jobs == [("Literate Programming", "knuth1984")]


def test_print_job_without_entry_uses_fallback_label(make_renderer, print_service):
    renderer = make_renderer("\\title")
    renderer.export_as_print_job()
    assert print_service.jobs == [("", "NO ENTRY")]


def test_print_job_captures_output_at_submission(make_renderer, entry, print_service):
    """Test a later refresh does not change an already submitted job."""
    jobs = []
    renderer = make_renderer("\\title", background=jobs.append)
    renderer.set_entry(entry)

    renderer.export_as_print_job()
    entry.set_field("title", "Changed")
    jobs[0]()

    assert print_service.jobs == [("Literate Programming", "knuth1984")]


def test_print_failure_notifies_user(make_renderer, entry, notifier, failing_print_service, caplog):
    """Test printer errors are logged and shown, and the renderer stays usable."""
    renderer = make_renderer("\\title", print_service=failing_print_service)
    renderer.set_entry(entry)

    with caplog.at_level("INFO", logger="bibpreview"):
        renderer.export_as_print_job()

    assert notifier.errors == [("Print entry preview", "Could not print preview.\npaper jam")]
    assert "Could not print preview" in caplog.text

    entry.set_field("title", "Still works")
    assert renderer.rendered_output == "Still works"


def test_print_without_service_is_logged(make_renderer, background, caplog):
    renderer = make_renderer("\\title", print_service=None)
    with caplog.at_level("WARNING", logger="bibpreview"):
        renderer.export_as_print_job()
    assert background.jobs == 0
    assert "No print service" in caplog.text


def test_registered_print_service_is_used(make_renderer, entry, spare_print_service):
    from bibpreview.protocols import register_print_service

    registered = spare_print_service
    register_print_service(registered)
    renderer = make_renderer("\\year", print_service=None, entry=entry)
    renderer.export_as_print_job()

    assert registered.jobs == [("1984", "knuth1984")]


def test_close_unsubscribes(make_renderer, entry):
    renderer = make_renderer("\\title")
    renderer.set_entry(entry)
    renderer.close()
    assert not entry.has_listener(renderer)


def test_layout_format_is_required(sink):
    from bibpreview.core import InlineDisplayThread
    from bibpreview.preview import LivePreviewRenderer

    with pytest.raises(ValueError):
        LivePreviewRenderer(sink, None, display_thread=InlineDisplayThread(), background=lambda job: job())


def test_print_failure_without_notifier_warns(make_renderer, entry, failing_print_service, caplog):
    """Test a print failure with no notification sink is still reported as a warning."""
    renderer = make_renderer("\\title", print_service=failing_print_service, notification_sink=None)
    renderer.set_entry(entry)

    with caplog.at_level("WARNING", logger="bibpreview"):
        renderer.export_as_print_job()

    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert len(warnings) == 1
    assert "paper jam" in warnings[0].getMessage()
